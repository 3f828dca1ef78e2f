"""
RTD Module Configuration

Configuration may come from three sources, highest priority first:
the publisher at call time, the identity platform, and built-in
defaults. Every field of ModuleParams/ModuleConfig is Optional so that
partial configs can be layered - None means "inherit from the layer
below".

Keys keep the publisher-facing camelCase names on the wire
(waitForIt, params.maxSegs, params.acBidders, ...).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from ..logging import config_logger
from ..utils.constants import DEFAULT_MAX_SEGS, DEFAULT_WAIT_FOR_IT

logger = config_logger()


class InvalidModuleConfigError(ValueError):
    """Raised by strict parsing when a config value has the wrong shape."""


def _reject(key: str, value: Any, strict: bool) -> None:
    if strict:
        raise InvalidModuleConfigError(f"Invalid value for '{key}': {value!r}")
    logger.debug("Ignoring invalid config value", key=key, value=repr(value))


def _parse_max_segs(value: Any, strict: bool) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        _reject("maxSegs", value, strict)
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        _reject("maxSegs", value, strict)
        return None
    return value


def _parse_bidders(key: str, value: Any, strict: bool) -> Optional[list[str]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple, set, frozenset)):
        _reject(key, value, strict)
        return None
    bidders: list[str] = []
    for bidder in value:
        code = str(bidder)
        if code not in bidders:
            bidders.append(code)
    return bidders


@dataclass
class TransformationConfig:
    """
    A configured ``user.data`` transformation.

    Attributes:
        id: Registered transformation name (e.g. "iab")
        config: Transformation-specific settings
    """

    id: str
    config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "config": self.config}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransformationConfig":
        config = data.get("config")
        return cls(
            id=str(data.get("id", "")),
            config=config if isinstance(config, dict) else {},
        )


def _parse_transformations(value: Any, strict: bool) -> Optional[list[TransformationConfig]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        _reject("transformations", value, strict)
        return None
    transformations = []
    for item in value:
        if isinstance(item, TransformationConfig):
            transformations.append(item)
        elif isinstance(item, dict) and item.get("id"):
            transformations.append(TransformationConfig.from_dict(item))
        else:
            _reject("transformations", item, strict)
    return transformations


@dataclass
class ModuleParams:
    """
    Signal distribution settings.

    All fields are Optional to support partial overrides.
    """

    max_segs: Optional[int] = None  # Cap per emitted signal list
    ac_bidders: Optional[list[str]] = None  # Receive AC signals
    cc_bidders: Optional[list[str]] = None  # Receive custom cohorts
    overwrites: Optional[dict[str, Callable]] = None  # Ad unit bid patchers
    transformations: Optional[list[TransformationConfig]] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire-format dictionary, excluding None values."""
        result: dict[str, Any] = {}
        if self.max_segs is not None:
            result["maxSegs"] = self.max_segs
        if self.ac_bidders is not None:
            result["acBidders"] = list(self.ac_bidders)
        if self.cc_bidders is not None:
            result["ccBidders"] = list(self.cc_bidders)
        if self.overwrites is not None:
            result["overwrites"] = dict(self.overwrites)
        if self.transformations is not None:
            result["transformations"] = [t.to_dict() for t in self.transformations]
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "ModuleParams":
        """Create from a wire-format dictionary."""
        if not isinstance(data, dict):
            if strict:
                raise InvalidModuleConfigError(f"params must be an object: {data!r}")
            return cls()

        overwrites = data.get("overwrites")
        if overwrites is not None and not isinstance(overwrites, dict):
            _reject("overwrites", overwrites, strict)
            overwrites = None

        return cls(
            max_segs=_parse_max_segs(data.get("maxSegs"), strict),
            ac_bidders=_parse_bidders("acBidders", data.get("acBidders"), strict),
            cc_bidders=_parse_bidders("ccBidders", data.get("ccBidders"), strict),
            overwrites=dict(overwrites) if overwrites is not None else None,
            transformations=_parse_transformations(data.get("transformations"), strict),
        )


@dataclass
class ModuleConfig:
    """A single configuration layer."""

    wait_for_it: Optional[bool] = None
    params: ModuleParams = field(default_factory=ModuleParams)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.wait_for_it is not None:
            result["waitForIt"] = self.wait_for_it
        params = self.params.to_dict()
        if params:
            result["params"] = params
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None, strict: bool = False) -> "ModuleConfig":
        """Create from a wire-format dictionary. Unknown keys are ignored."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            if strict:
                raise InvalidModuleConfigError(f"Config must be an object: {data!r}")
            return cls()

        wait_for_it = data.get("waitForIt")
        if wait_for_it is not None and not isinstance(wait_for_it, bool):
            _reject("waitForIt", wait_for_it, strict)
            wait_for_it = None

        params = data.get("params")
        return cls(
            wait_for_it=wait_for_it,
            params=ModuleParams.from_dict(params, strict) if params is not None else ModuleParams(),
        )


@dataclass
class ResolvedModuleConfig:
    """
    Fully resolved configuration with no None values.

    This is what the collector, router and writer consume.
    """

    wait_for_it: bool
    max_segs: int
    ac_bidders: list[str] = field(default_factory=list)
    cc_bidders: list[str] = field(default_factory=list)
    overwrites: dict[str, Callable] = field(default_factory=dict)
    transformations: list[TransformationConfig] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary (override callables are listed by key)."""
        return {
            "waitForIt": self.wait_for_it,
            "params": {
                "maxSegs": self.max_segs,
                "acBidders": list(self.ac_bidders),
                "ccBidders": list(self.cc_bidders),
                "overwrites": sorted(self.overwrites),
                "transformations": [t.to_dict() for t in self.transformations],
            },
        }


def get_default_module_config() -> ModuleConfig:
    """Built-in defaults, the lowest priority layer."""
    return ModuleConfig(
        wait_for_it=DEFAULT_WAIT_FOR_IT,
        params=ModuleParams(
            max_segs=DEFAULT_MAX_SEGS,
            ac_bidders=[],
            cc_bidders=[],
            overwrites={},
            transformations=[],
        ),
    )


def load_module_config(path: str | Path) -> ModuleConfig:
    """
    Load a publisher module config from a YAML file.

    Raises:
        InvalidModuleConfigError: If the file is not a valid config
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidModuleConfigError(f"YAML error in {path}: {e}") from e

    return ModuleConfig.from_dict(data or {}, strict=True)
