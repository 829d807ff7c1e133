"""Identity token providers."""

import os
from abc import ABC, abstractmethod
from typing import Mapping, Optional, TYPE_CHECKING
from urllib.parse import quote
import requests
from .errors import IdentityProviderError

if TYPE_CHECKING:
    from .reporting import ReportingSink

REQUEST_URL_ENV = "ACTIONS_ID_TOKEN_REQUEST_URL"
REQUEST_TOKEN_ENV = "ACTIONS_ID_TOKEN_REQUEST_TOKEN"
# Unreserved in the runner's audience parameter, on top of quote() defaults
URI_COMPONENT_SAFE = "!*'()"


class IdentityTokenProvider(ABC):
    """Abstract base class for identity token providers."""

    @abstractmethod
    def get_token(self, audience: str) -> str:
        """
        Get a signed identity token for an audience.

        Args:
            audience: Audience claim requested for the token

        Returns:
            Signed JWT

        Raises:
            IdentityProviderError: If the token cannot be acquired
        """
        pass


class GitHubActionsIdentityProvider(IdentityTokenProvider):
    """OIDC tokens from the GitHub Actions runner."""

    def __init__(
        self,
        reporter: Optional["ReportingSink"] = None,
        timeout: float = 10,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize provider.

        Args:
            reporter: Optional sink used to mask the acquired token
            timeout: Request timeout in seconds
            environ: Environment mapping (default: os.environ)
        """
        self.reporter = reporter
        self.timeout = timeout
        self.environ = os.environ if environ is None else environ

    def get_token(self, audience: str) -> str:
        token_url = self.environ.get(REQUEST_URL_ENV)
        if not token_url:
            raise IdentityProviderError(
                f"Unable to get {REQUEST_URL_ENV} env variable"
            )

        token_bearer = self.environ.get(REQUEST_TOKEN_ENV)
        if not token_bearer:
            raise IdentityProviderError(
                f"Unable to get {REQUEST_TOKEN_ENV} env variable"
            )

        # The runner URL already carries a query string
        if audience:
            token_url = f"{token_url}&audience={quote(audience, safe=URI_COMPONENT_SAFE)}"

        try:
            response = requests.get(
                token_url,
                headers={"Authorization": f"Bearer {token_bearer}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise IdentityProviderError(f"Failed to get ID Token. {e}")

        token = data.get("value") if isinstance(data, dict) else None
        if not token:
            raise IdentityProviderError("Response json body do not have ID Token field")

        if self.reporter is not None:
            self.reporter.set_secret(token)

        return token


class StaticIdentityProvider(IdentityTokenProvider):
    """Pre-issued identity token, for runs outside GitHub Actions."""

    def __init__(self, token: Optional[str]):
        self.token = token

    def get_token(self, audience: str) -> str:
        if not self.token:
            raise IdentityProviderError("No identity token supplied")
        return self.token
