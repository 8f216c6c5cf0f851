"""Exceptions raised while talking to the Pollinations image API"""
from typing import Optional


class PollinationsError(Exception):
    """Base exception for polli errors"""
    kind = "config"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigError(PollinationsError):
    """Missing API key or prompt; the invocation has to be fixed"""
    kind = "config"


class TransportError(PollinationsError):
    """DNS, connection, TLS or timeout failure"""
    kind = "transport"


class HttpError(PollinationsError):
    """Non-200 response from the API"""
    kind = "http"


class SaveError(PollinationsError):
    """The image was fetched but could not be written to disk"""
    kind = "io"


class ResponseParseError(PollinationsError):
    """A 200 response whose body is not the expected JSON"""
    kind = "http"
