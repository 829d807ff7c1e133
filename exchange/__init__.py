"""
OAuth 2.0 jwt-bearer token exchange for CI workflows.

This package trades a GitHub Actions OIDC token for an access token issued by
an external authorization server (RFC 7523), eliminating the need for
long-lived secrets in workflow configuration.
"""

__version__ = "0.1.0"
