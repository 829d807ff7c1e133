"""HTTP transport for the token endpoint."""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import requests
from .config import DEFAULT_TIMEOUT
from .errors import TransportError

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class TokenTransport(ABC):
    """Abstract base class for token endpoint transports."""

    @abstractmethod
    def send(self, url: str, body: str, headers: Dict[str, str]) -> str:
        """
        POST a request body and return the raw response body.

        Args:
            url: Token endpoint URL
            body: Form-encoded request body
            headers: Request headers

        Returns:
            Raw response body

        Raises:
            TransportError: On any network-level failure
        """
        pass


class RequestsTransport(TokenTransport):
    """Token transport backed by requests."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize transport.

        Args:
            timeout: Request timeout in seconds
            session: Optional requests session (default: module-level requests)
        """
        self.timeout = timeout
        self.session = session

    def send(self, url: str, body: str, headers: Dict[str, str]) -> str:
        # Non-2xx bodies are returned as-is, the response validator judges them
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(url, data=body, headers=headers, timeout=self.timeout)
            return response.text
        except requests.RequestException as e:
            raise TransportError(str(e))
