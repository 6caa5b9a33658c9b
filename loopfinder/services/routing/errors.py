from typing import Optional


class RoutingError(Exception):
    """A single routing request failed (network error or provider rejection)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProviderConfigurationError(Exception):
    """The routing provider cannot be used at all, e.g. missing credentials"""
