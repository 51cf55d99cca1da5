"""Error types and the not-supported outcome."""

from dataclasses import dataclass


class LiveTvError(Exception):
    """Base class for live TV service errors."""


class ProxyError(LiveTvError):
    """The MPExtended proxy could not be reached or returned garbage."""

    def __init__(self, message: str, method: str | None = None):
        super().__init__(message)
        self.method = method


class UnknownStreamIdError(LiveTvError):
    """A close was requested for a stream that is not the tracked one."""

    def __init__(self, stream_id: str):
        super().__init__(f"Unknown stream id requested for close: {stream_id}")
        self.stream_id = stream_id


@dataclass(frozen=True)
class NotSupported:
    """Returned by operations the MediaPortal backend has no equivalent for."""

    operation: str

    @property
    def message(self) -> str:
        return f"{self.operation} is not supported by the MediaPortal live TV service"
