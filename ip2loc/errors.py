"""Exceptions raised by the ipstack client and the CLI driver."""
from __future__ import annotations


class Ip2LocError(Exception):
    """Base class for every failure reported to the user."""


class ConfigError(Ip2LocError):
    """Raised when the configuration file cannot be located, read or parsed."""


class PlanError(Ip2LocError):
    """Raised when an operation is not available on the account's plan."""

    def __init__(self, message: str = "free plan does not support bulk lookup") -> None:
        super().__init__(message)


class InvalidTargetError(Ip2LocError):
    """Raised when a target cannot be placed in a request URL at all."""


class TransportError(Ip2LocError):
    """Raised on DNS, connect, TLS or timeout failures."""


class HTTPStatusError(TransportError):
    """Raised when the service answers with a status other than 200."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"unexpected HTTP status {status_code} from {url}")


class DecodeError(Ip2LocError):
    """Raised when a response body is not JSON of any expected shape."""


class ServiceError(Ip2LocError):
    """Structured error reported by the remote service."""

    def __init__(self, code: int, type: str, info: str) -> None:
        self.code = code
        self.type = type
        self.info = info
        super().__init__(f"error {code}: {type} ({info})")
