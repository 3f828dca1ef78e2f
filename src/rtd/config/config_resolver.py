"""
Configuration Resolver

Resolves the effective module configuration by layering, lowest
priority first: built-in defaults → platform config → caller config.

The platform config is read live from the identity SDK when it is on
the page. Otherwise the copy the SDK last cached in the signal store
is used; that copy is read once per provider.
"""

from typing import Any, Optional

from ..logging import config_logger
from ..models.engine_state import EngineState
from ..storage.signal_store import SignalStore, read_json
from ..utils.constants import DEFAULT_MAX_SEGS, PLATFORM_CONFIG_KEY
from .module_config import (
    ModuleConfig,
    ModuleParams,
    ResolvedModuleConfig,
    get_default_module_config,
)

logger = config_logger()


def _merge_value(child_value: Any, parent_value: Any) -> Any:
    """
    Merge child value with parent value.

    If child is None, use parent. Otherwise use child.
    For lists, child replaces parent (no merging).
    For dicts, keys merge with child winning.
    """
    if child_value is None:
        return parent_value
    if isinstance(child_value, dict) and isinstance(parent_value, dict):
        result = parent_value.copy()
        result.update(child_value)
        return result
    return child_value


def _merge_params(child: ModuleParams, parent: ModuleParams) -> ModuleParams:
    merged = {}
    for key in child.__dict__:
        merged[key] = _merge_value(getattr(child, key), getattr(parent, key))
    return ModuleParams(**merged)


def merge_configs(child: ModuleConfig, parent: ModuleConfig) -> ModuleConfig:
    """
    Merge child config into parent config.

    Child values override parent values. None values in child
    inherit from parent.
    """
    return ModuleConfig(
        wait_for_it=_merge_value(child.wait_for_it, parent.wait_for_it),
        params=_merge_params(child.params, parent.params),
    )


def to_resolved_config(config: ModuleConfig) -> ResolvedModuleConfig:
    """
    Convert a merged ModuleConfig to a fully resolved config.

    Any value still None falls back to the built-in default.
    """
    merged = merge_configs(config, get_default_module_config())
    params = merged.params
    return ResolvedModuleConfig(
        wait_for_it=bool(merged.wait_for_it),
        max_segs=params.max_segs or DEFAULT_MAX_SEGS,
        ac_bidders=list(params.ac_bidders or []),
        cc_bidders=list(params.cc_bidders or []),
        overwrites=dict(params.overwrites or {}),
        transformations=list(params.transformations or []),
    )


def lift_into_params(params: Any) -> dict[str, Any]:
    """Wrap platform params as a config layer; anything but an object lifts to {}."""
    return {"params": params} if isinstance(params, dict) else {}


class ConfigResolver:
    """
    Resolves effective module configuration.

    Priority (highest first): caller → platform → defaults.
    """

    def __init__(
        self,
        store: SignalStore,
        sdk: Optional[Any] = None,
        state: Optional[EngineState] = None,
    ):
        """
        Initialize the config resolver.

        Args:
            store: Signal store holding the cached platform config
            sdk: Identity SDK handle (see rtd.sdk.IdentitySdk)
            state: Provider state holding the platform config cache
        """
        self._store = store
        self._sdk = sdk
        self._state = state or EngineState()

    @property
    def state(self) -> EngineState:
        return self._state

    def load_cached_platform_config(self) -> dict[str, Any]:
        """
        Read the platform config cached in the store.

        Only the first call reads the store; later calls return the
        cached value. Failures cache {}.
        """
        if not self._state.cache_loaded:
            params = read_json(self._store, PLATFORM_CONFIG_KEY).or_default({})
            self._state.cached_platform_params = lift_into_params(params)
            self._state.cache_loaded = True
        return self._state.cached_platform_params

    def _live_platform_config(self) -> Optional[dict[str, Any]]:
        if self._sdk is None:
            return None
        try:
            return lift_into_params(self._sdk.get_rtd_config())
        except Exception as e:
            logger.debug("Platform config unavailable from SDK", error=str(e))
            return None

    def get_platform_config(self) -> ModuleConfig:
        """Live SDK config when reachable, else the cached store copy."""
        data = self._live_platform_config()
        if data is None:
            data = self.load_cached_platform_config()
        return ModuleConfig.from_dict(data)

    def resolve(self, caller_config: ModuleConfig | dict[str, Any] | None = None) -> ResolvedModuleConfig:
        """
        Resolve the effective configuration.

        Args:
            caller_config: Publisher config supplied for this auction

        Returns:
            ResolvedModuleConfig with every value set
        """
        if not isinstance(caller_config, ModuleConfig):
            caller_config = ModuleConfig.from_dict(caller_config)

        merged = merge_configs(caller_config, self.get_platform_config())
        return to_resolved_config(merged)
