from typing import Optional


class RelayError(Exception):
    """Base for every error a relay route turns into a response."""


class InvalidRequest(RelayError):
    """Required input is missing. Raised before any upstream call."""


class ConfigurationError(RelayError):
    """A required setting is absent. Raised before any upstream call."""

    def __init__(self, setting: str, hint: Optional[str] = None):
        self.setting = setting
        self.hint = hint
        super().__init__(f"{setting} is not set")


class UpstreamError(RelayError):
    """The upstream answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"upstream returned {status_code}")


class TransportError(RelayError):
    """The upstream could not be reached (network, DNS, TLS, SMTP)."""
