"""Exchange orchestrator coordinating identity, transport and reporting."""

from typing import Optional
from .config import ExchangeConfig
from .errors import ExchangeError
from .identity import IdentityTokenProvider
from .reporting import ReportingSink
from .request import build_request
from .response import TokenResponse, parse_response
from .transport import FORM_HEADERS, TokenTransport

UNKNOWN_FAILURE_MESSAGE = "Action failed with an unknown error"


class ExchangeOrchestrator:
    """Runs one jwt-bearer token exchange and reports the outcome."""

    def __init__(
        self,
        identity_provider: IdentityTokenProvider,
        transport: TokenTransport,
        reporter: ReportingSink,
    ):
        """
        Initialize orchestrator with its collaborators.

        Args:
            identity_provider: Source of the identity assertion
            transport: Transport used to reach the token endpoint
            reporter: Sink receiving progress, outputs and failures
        """
        self.identity_provider = identity_provider
        self.transport = transport
        self.reporter = reporter

    def exchange(self, config: ExchangeConfig) -> TokenResponse:
        """
        Exchange an identity token for an access token.

        Args:
            config: Exchange configuration

        Returns:
            Validated TokenResponse

        Raises:
            ExchangeError: If any step fails
        """
        self.reporter.info("Requesting GitHub OIDC token...")
        assertion = self.identity_provider.get_token(config.github_audience)
        self.reporter.info("GitHub OIDC token acquired.")

        request = build_request(config, assertion)

        self.reporter.info(
            "Requesting access token from the token endpoint on the specified "
            "server using jwt-bearer flow."
        )
        raw_body = self.transport.send(config.token_url, request.encode(), dict(FORM_HEADERS))

        return parse_response(raw_body)

    def publish(self, response: TokenResponse) -> None:
        """Mask the access token, then publish outputs."""
        self.reporter.set_secret(response.access_token)
        for name, value in response.to_outputs().items():
            self.reporter.set_output(name, value)
        self.reporter.info("Access token acquired and set as output.")

    def run(self, config: ExchangeConfig) -> bool:
        """
        Run the exchange, converting every failure into a report.

        Args:
            config: Exchange configuration

        Returns:
            True if outputs were published, False if the run failed
        """
        try:
            self.publish(self.exchange(config))
            return True
        except ExchangeError as e:
            report_failure(self.reporter, e)
        except Exception:
            report_failure(self.reporter, None)
        return False


def report_failure(reporter: ReportingSink, error: Optional[ExchangeError]) -> None:
    """
    Report a terminal failure.

    Args:
        reporter: Sink receiving the failure
        error: Recognized error, or None for failures outside the taxonomy
    """
    if error is None:
        reporter.set_failed(UNKNOWN_FAILURE_MESSAGE)
        return

    reporter.error(f"Error message: {error.message}")
    reporter.set_failed(f"Action failed with error: {error.message}")
