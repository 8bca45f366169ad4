"""Custom exception classes for hostd-pin."""


class HostPinError(Exception):
    """Base exception for all hostd-pin errors."""
    pass


class ConfigurationError(HostPinError):
    """Raised when there's a configuration error."""
    pass


class ValidationError(ConfigurationError):
    """Raised when a configuration value fails validation."""
    pass


class QuoteUnavailable(HostPinError):
    """Raised when an exchange rate quote could not be obtained."""
    pass


class CurrencyNotFoundError(QuoteUnavailable):
    """Raised when the quote service has no rate for the currency."""

    def __init__(self, currency: str):
        super().__init__(f"currency not found: {currency}")
        self.currency = currency


class ConversionFailure(HostPinError):
    """Raised when a fiat price cannot be converted to hastings."""
    pass


class EndpointUpdateFailure(HostPinError):
    """Raised when a host rejects or fails a settings update."""

    def __init__(self, address: str, message: str):
        super().__init__(f"failed to update host {address!r}: {message}")
        self.address = address
