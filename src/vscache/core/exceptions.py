"""
Exception hierarchy for vscache.

All service-specific exceptions inherit from VSCacheError so the HTTP layer
can map them to status codes in one place.
"""

from __future__ import annotations

from typing import Any


class VSCacheError(Exception):
    """
    Base exception for all vscache errors.

    Example:
        >>> try:
        ...     await service.get_balance("0xabc")
        ... except VSCacheError as e:
        ...     print(f"Lookup failed: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(VSCacheError):
    """
    Configuration is missing or invalid.

    Raised when:
    - The explorer base URL for the active network is not set
    - The RPC URL is not set but an on-chain read was requested
    - A configuration value fails validation
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.setting = setting


class ValidationError(VSCacheError):
    """
    Input validation error.

    Raised before any upstream call is attempted when:
    - A required request parameter is missing
    - A parameter value is invalid (e.g. non-numeric page)
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class InvalidNetworkError(ValidationError):
    """Network value is neither 'mainnet' nor 'testnet'."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Invalid network: {value!r}. Expected 'mainnet' or 'testnet'",
            field="network",
        )
        self.value = value


class InvalidAddressError(ValidationError):
    """Address is not a 20-byte hex string, even after checksum re-derivation."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid address format: {address}", field="address")
        self.address = address


class UpstreamUnavailableError(VSCacheError):
    """
    Upstream HTTP communication failed.

    Raised when:
    - The upstream answered with a non-2xx status
    - The request timed out or the connection failed
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        body: str | None = None,
        timed_out: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url
        self.body = body
        self.timed_out = timed_out

    def is_rate_limited(self) -> bool:
        """Check if this is a rate limit error."""
        return self.status_code == 429

    def is_server_error(self) -> bool:
        """Check if this is a server-side error."""
        return self.status_code is not None and 500 <= self.status_code < 600


class UpstreamRejectedError(UpstreamUnavailableError):
    """
    The explorer answered 2xx but flagged the request as failed.

    Explorer "module" endpoints report errors in-band with ``status: "0"``,
    a ``message`` and a ``result`` describing the problem.
    """

    def __init__(
        self,
        message: str,
        result: Any = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.result = result


class MalformedUpstreamDataError(UpstreamUnavailableError):
    """
    Upstream data has an unexpected shape.

    Raised when a required field is missing or a field has the wrong type.
    Optional fields that are simply absent are defaulted instead.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.field = field


class ContractCallError(VSCacheError):
    """
    An on-chain read failed.

    Raised when:
    - The contract call reverted or the RPC returned an error object
    - The call returned no data
    - The RPC endpoint was unreachable or timed out
    """

    def __init__(
        self,
        message: str,
        address: str,
        method: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.address = address
        self.method = method

    def __str__(self) -> str:
        return f"[{self.method} @ {self.address}] {self.message}"
