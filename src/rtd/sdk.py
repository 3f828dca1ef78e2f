"""
Identity SDK handles.

The identity SDK computes cohorts, writes them to the signal store and
publishes the platform module config. The provider only needs to know
whether the SDK is present, read its config, and be told when it is
ready.
"""

from typing import Any, Callable, Optional, Protocol

from .utils.constants import SDK_READY_STAGE


class SdkUnavailableError(RuntimeError):
    """Raised when the SDK cannot serve a request."""


class IdentitySdk(Protocol):
    """Interface the provider consumes from the identity SDK."""

    def is_present(self) -> bool:
        ...

    def get_rtd_config(self) -> Any:
        ...

    def ready(self, callback: Callable[[], None], stage: str = SDK_READY_STAGE) -> None:
        ...


class AbsentIdentitySdk:
    """Stand-in used when no SDK is loaded."""

    def is_present(self) -> bool:
        return False

    def get_rtd_config(self) -> Any:
        raise SdkUnavailableError("Identity SDK is not loaded")

    def ready(self, callback: Callable[[], None], stage: str = SDK_READY_STAGE) -> None:
        raise SdkUnavailableError("Identity SDK is not loaded")


class MockIdentitySdk:
    """In-memory SDK for testing and offline runs."""

    def __init__(
        self,
        rtd_config: Any = None,
        present: bool = True,
        is_ready: bool = False,
        config_error: Optional[Exception] = None,
    ):
        self._rtd_config = rtd_config
        self._present = present
        self._ready = is_ready
        self._config_error = config_error
        self._listeners: list[Callable[[], None]] = []

    def is_present(self) -> bool:
        return self._present

    def get_rtd_config(self) -> Any:
        if self._config_error is not None:
            raise self._config_error
        return self._rtd_config

    def set_rtd_config(self, rtd_config: Any) -> None:
        self._rtd_config = rtd_config
        self._config_error = None

    def ready(self, callback: Callable[[], None], stage: str = SDK_READY_STAGE) -> None:
        """Run ``callback`` now if ready, otherwise once mark_ready() is called."""
        if self._ready:
            callback()
        else:
            self._listeners.append(callback)

    @property
    def pending_listeners(self) -> int:
        return len(self._listeners)

    def mark_ready(self) -> None:
        """Flip to ready and fire every pending listener once."""
        self._ready = True
        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            callback()
