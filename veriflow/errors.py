"""Exception hierarchy for Veriflow."""


class VeriflowError(Exception):
    """Base class for all Veriflow errors."""


class StoreError(VeriflowError):
    """Reading or writing the backing store failed."""


class InvalidViewSyntaxError(VeriflowError):
    """A CREATE VIEW statement could not be parsed."""

    def __init__(self, message: str = "Invalid CREATE VIEW syntax"):
        super().__init__(message)


class ConfigError(VeriflowError):
    """Configuration file or environment values are invalid."""


class LLMError(VeriflowError):
    """The LLM provider returned an error or an unusable response."""


__all__ = [
    "VeriflowError",
    "StoreError",
    "InvalidViewSyntaxError",
    "ConfigError",
    "LLMError",
]
