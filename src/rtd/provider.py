"""
RTD Provider - the auction-preparation entry point.

On every auction the host calls prepare() with its request object:

    1. Resolve the module config (caller → platform → defaults)
    2. Collect signals from the store
    3. Apply legacy ad unit overrides
    4. Route signals and write each bidder's ORTB2 fragment
    5. Complete - unless waitForIt is set and the identity SDK is on
       the page but not yet known to be ready. Then completion waits for
       the SDK's ready callback, which re-runs steps 1-4 first.

The ready wait only happens until the SDK has reported ready once for
this provider.
"""

from typing import Any, Callable, Optional

from .bidders.adapters import apply_ad_unit_overrides
from .collector.signal_collector import SignalCollector
from .config.config_resolver import ConfigResolver
from .config.module_config import ModuleConfig, ResolvedModuleConfig
from .logging import LogContext, bidder_logger, provider_logger
from .models.engine_state import EngineState
from .models.signal_bundle import SignalBundle
from .router.signal_router import SignalRouter
from .sdk import AbsentIdentitySdk, IdentitySdk
from .storage.signal_store import SignalStore
from .utils.constants import SDK_READY_STAGE
from .utils.deep import deep_get
from .writer.ortb_writer import OrtbFragmentWriter

logger = provider_logger()


class CompletionHandle:
    """
    Resolves exactly once when a prepare() call has finished.

    Callbacks added after resolution run immediately.
    """

    def __init__(self):
        self._done = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def done(self) -> bool:
        return self._done

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        if self._done:
            callback()
        else:
            self._callbacks.append(callback)

    def resolve(self) -> bool:
        """Mark done and run callbacks. Returns False if already resolved."""
        if self._done:
            return False
        self._done = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        return True


class RtdProvider:
    """
    Enriches bid requests with cohort signals.

    Each provider owns its EngineState, so independent providers never
    share the platform config cache or the SDK ready latch.
    """

    name = "permutive"

    def __init__(
        self,
        store: SignalStore,
        sdk: Optional[IdentitySdk] = None,
        state: Optional[EngineState] = None,
        router: Optional[SignalRouter] = None,
        writer: Optional[OrtbFragmentWriter] = None,
    ):
        """
        Initialize the provider.

        Args:
            store: Store the identity SDK writes cohorts to
            sdk: Identity SDK handle (absent when not loaded)
            state: Provider state, created fresh if not given
            router: Signal router
            writer: ORTB2 fragment writer
        """
        self._sdk = sdk or AbsentIdentitySdk()
        self._state = state or EngineState()
        self._resolver = ConfigResolver(store, self._sdk, self._state)
        self._collector = SignalCollector(store)
        self._router = router or SignalRouter()
        self._writer = writer or OrtbFragmentWriter()

    @property
    def state(self) -> EngineState:
        return self._state

    def init(self) -> bool:
        """Read the cached platform config. Safe to call more than once."""
        self._resolver.load_cached_platform_config()
        return True

    def is_sdk_on_page(self) -> bool:
        try:
            return bool(self._sdk.is_present())
        except Exception:
            return False

    def get_module_config(self, caller_config: ModuleConfig | dict[str, Any] | None = None) -> ResolvedModuleConfig:
        return self._resolver.resolve(caller_config)

    def collect(self, max_segs: int) -> SignalBundle:
        return self._collector.collect(max_segs)

    def set_bidder_rtb(
        self,
        bidder_ortb2: dict[str, Any],
        config: ResolvedModuleConfig,
        bundle: SignalBundle,
    ) -> list[str]:
        """
        Write routed signals into every candidate bidder's fragment.

        A bidder whose write fails keeps its previous fragment.

        Returns:
            Bidder codes whose fragments were updated
        """
        updated = []
        for bidder, signals in self._router.route(bundle, config).items():
            try:
                bidder_ortb2[bidder] = self._writer.write(
                    bidder_ortb2.get(bidder),
                    signals,
                    config.transformations,
                )
                updated.append(bidder)
            except Exception:
                bidder_logger(bidder).error("Failed to update ortb2 fragment", exc_info=True)
        return updated

    def read_and_set_cohorts(
        self,
        request: Any,
        config: ResolvedModuleConfig,
    ) -> Optional[SignalBundle]:
        """
        Run one full pass over a request object.

        Args:
            request: Host request with ``adUnits`` and ``ortb2Fragments.bidder``
            config: Resolved module config

        Returns:
            The bundle written, or None for a missing request
        """
        if not isinstance(request, dict):
            logger.debug("No request object, skipping")
            return None

        bundle = self.collect(config.max_segs)

        try:
            apply_ad_unit_overrides(request.get("adUnits"), config, bundle)
        except Exception:
            logger.error("Failed to apply ad unit overrides", exc_info=True)

        bidder_ortb2 = deep_get(request, "ortb2Fragments.bidder")
        if isinstance(bidder_ortb2, dict):
            self.set_bidder_rtb(bidder_ortb2, config, bundle)
        else:
            logger.debug("No bidder ortb2 fragments on request")
        return bundle

    def _should_wait(self, config: ResolvedModuleConfig) -> bool:
        if self._state.sdk_realtime:
            return False
        return config.wait_for_it and self.is_sdk_on_page()

    def prepare(
        self,
        request: Any,
        caller_config: ModuleConfig | dict[str, Any] | None = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> CompletionHandle:
        """
        Enrich a request before its auction.

        Args:
            request: Host request object, mutated in place
            caller_config: Publisher config for this auction
            on_complete: Called exactly once when enrichment is finished

        Returns:
            Handle resolved when enrichment is finished
        """
        handle = CompletionHandle()
        if on_complete is not None:
            handle.add_done_callback(on_complete)

        def complete() -> None:
            if handle.resolve():
                logger.info("Request data updated")

        auction_id = request.get("auctionId") if isinstance(request, dict) else None
        with LogContext(request_id=str(auction_id) if auction_id else None, enrichment_pass=1) as context:
            config = self.get_module_config(caller_config)
            self.read_and_set_cohorts(request, config)

            if not self._should_wait(config):
                complete()
                return handle

            def on_sdk_ready() -> None:
                with LogContext(request_id=context.request_id, enrichment_pass=2):
                    logger.info("SDK is realtime, updating cohorts")
                    self.read_and_set_cohorts(request, self.get_module_config(caller_config))
                    self._state.sdk_realtime = True
                    complete()

            try:
                self._sdk.ready(on_sdk_ready, SDK_READY_STAGE)
            except Exception:
                logger.error("Failed to register SDK ready listener", exc_info=True)
                complete()
                return handle

            if not handle.done:
                logger.info("Registered cohort update when SDK is realtime")
        return handle
