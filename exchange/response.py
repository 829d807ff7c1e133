"""Token endpoint response validation."""

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from .errors import (
    MalformedResponseError,
    MissingAccessTokenError,
    MissingTokenTypeError,
)


@dataclass(frozen=True)
class TokenResponse:
    """Access token issued by the authorization server."""

    access_token: str
    token_type: str
    expires_in: Optional[Union[int, float]] = None

    def to_outputs(self) -> Dict[str, Any]:
        """Outputs to publish, in order. expires-in only when provided."""
        outputs: Dict[str, Any] = {
            "access-token": self.access_token,
            "token-type": self.token_type,
        }
        if self.expires_in is not None:
            outputs["expires-in"] = self.expires_in
        return outputs


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def is_truthy(value: Any) -> bool:
    """
    JSON value truthiness as seen by a JavaScript consumer.

    Empty arrays and objects are truthy; null, false, 0, NaN and "" are not.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def parse_response(raw_body: str) -> TokenResponse:
    """
    Parse and validate a token endpoint response body.

    Args:
        raw_body: Raw response body

    Returns:
        TokenResponse with the issued token

    Raises:
        MalformedResponseError: If the body is not valid JSON
        MissingAccessTokenError: If access_token is absent or empty
        MissingTokenTypeError: If token_type is absent or empty
    """
    try:
        data = json.loads(raw_body, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedResponseError(str(e))

    # A non-object document carries no fields
    if not isinstance(data, dict):
        data = {}

    access_token = data.get("access_token")
    token_type = data.get("token_type")
    expires_in = data.get("expires_in")

    if not is_truthy(access_token):
        raise MissingAccessTokenError()
    if not is_truthy(token_type):
        raise MissingTokenTypeError()

    return TokenResponse(
        access_token=access_token,
        token_type=token_type,
        expires_in=expires_in if is_truthy(expires_in) else None,
    )
