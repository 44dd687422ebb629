"""Errors raised while talking to the automation host."""


class HostError(Exception):
    """Raised when the browser rejects or fails a host command."""


class HostConnectionError(HostError):
    """Raised when the browser's remote debugging endpoint is unreachable."""


class PayloadError(HostError):
    """Raised when an injected script throws inside the page."""

    def __init__(self, message: str, description: str = ""):
        super().__init__(message)
        self.description = description
