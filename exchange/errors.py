"""Error types raised during a token exchange."""

from typing import Optional


class ExchangeError(Exception):
    """Base class for recognized token exchange failures."""

    default_message = ""

    def __init__(self, message: Optional[str] = None):
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)


class IdentityProviderError(ExchangeError):
    """Identity token could not be acquired."""
    pass


class TransportError(ExchangeError):
    """Network-level failure talking to the token endpoint."""
    pass


class MalformedResponseError(ExchangeError):
    """Token endpoint response is not valid JSON."""
    pass


class MissingAccessTokenError(ExchangeError):
    """Token endpoint response has no access token."""

    default_message = "Access token not found in the response"


class MissingTokenTypeError(ExchangeError):
    """Token endpoint response has no token type."""

    default_message = "Token type not found in the response"


class ConfigError(ExchangeError):
    """Configuration validation error."""
    pass
