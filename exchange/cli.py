"""Command-line interface for token exchange."""

import sys
import click
from . import __version__
from .config import ExchangeConfig, load_config, load_default_config
from .errors import ConfigError
from .identity import GitHubActionsIdentityProvider, StaticIdentityProvider
from .orchestrator import ExchangeOrchestrator, report_failure
from .reporting import GitHubActionsReporter
from .transport import RequestsTransport


@click.group()
@click.version_option(version=__version__)
def main():
    """Exchange a GitHub OIDC token for an OAuth 2.0 access token."""
    pass


@main.command()
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file (YAML). Defaults to .token-exchange/config.yaml if present.",
)
@click.option("--github-audience", help="Audience of the GitHub OIDC token.")
@click.option("--request-token-url", help="Token endpoint of the authorization server.")
@click.option("--request-client-id", help="Client ID registered with the authorization server.")
@click.option("--request-audience", help="Audience parameter sent to the token endpoint.")
@click.option("--request-scope", help="Scope parameter sent to the token endpoint.")
@click.option(
    "--request-timeout",
    type=float,
    help="Token endpoint timeout in seconds.",
)
@click.option(
    "--id-token",
    envvar="TOKEN_EXCHANGE_ID_TOKEN",
    help="Use this identity token instead of requesting one from GitHub Actions.",
)
def run(
    config,
    github_audience,
    request_token_url,
    request_client_id,
    request_audience,
    request_scope,
    request_timeout,
    id_token,
):
    """Request an access token using the jwt-bearer grant."""
    reporter = GitHubActionsReporter()

    if id_token:
        identity_provider = StaticIdentityProvider(id_token)
    else:
        identity_provider = GitHubActionsIdentityProvider(reporter=reporter)

    overrides = {
        "github-audience": github_audience,
        "request-token-url": request_token_url,
        "request-client-id": request_client_id,
        "request-audience": request_audience,
        "request-scope": request_scope,
        "request-timeout": request_timeout,
    }

    try:
        defaults = load_config(config) if config else load_default_config()
        exchange_config = ExchangeConfig.from_action_inputs(
            overrides=overrides, defaults=defaults
        )
    except ConfigError as e:
        report_failure(reporter, e)
        sys.exit(1)

    orchestrator = ExchangeOrchestrator(
        identity_provider,
        RequestsTransport(timeout=exchange_config.timeout),
        reporter,
    )
    orchestrator.run(exchange_config)

    if reporter.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
