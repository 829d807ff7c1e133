"""Token request construction for the jwt-bearer grant."""

from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import urlencode
from .config import ExchangeConfig

GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


@dataclass(frozen=True)
class TokenRequest:
    """RFC 7523 jwt-bearer token request."""

    assertion: str
    client_id: str
    audience: Optional[str] = None
    scope: Optional[str] = None
    grant_type: str = GRANT_TYPE

    def to_fields(self) -> List[Tuple[str, str]]:
        """
        Get form fields in wire order.

        Optional fields are only present when non-empty.

        Returns:
            List of (name, value) pairs
        """
        fields = [
            ("grant_type", self.grant_type),
            ("assertion", self.assertion),
            ("client_id", self.client_id),
        ]
        if self.audience:
            fields.append(("audience", self.audience))
        if self.scope:
            fields.append(("scope", self.scope))
        return fields

    def encode(self) -> str:
        """Encode as an application/x-www-form-urlencoded body."""
        return urlencode(self.to_fields())


def build_request(config: ExchangeConfig, assertion: str) -> TokenRequest:
    """
    Build the token request for an identity assertion.

    Args:
        config: Exchange configuration
        assertion: Identity token returned by the identity provider

    Returns:
        TokenRequest ready to be encoded
    """
    return TokenRequest(
        assertion=assertion,
        client_id=config.client_id,
        audience=config.audience or None,
        scope=config.scope or None,
    )
