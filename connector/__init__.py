"""
Carrefour Connector Package
Authenticated session manager for the Carrefour account identity provider.

CLI Usage:
    python -m connector [options]

    Options:
        --login         Account e-mail (default: $CARREFOUR_LOGIN)
        --state-file    Cookie state file (default: cookies.json)
        --force-login   Ignore the stored session
        --timeout       Per-request timeout in seconds (default: 30)
"""

from .auth import (
    AuthenticationOrchestrator,
    AuthenticationOutcome,
    CookieStore,
    Credentials,
    ErrorKind,
    HttpClient,
)
from .run_config import ConnectorRunConfig

__all__ = [
    'AuthenticationOrchestrator',
    'AuthenticationOutcome',
    'CookieStore',
    'Credentials',
    'ErrorKind',
    'HttpClient',
    'ConnectorRunConfig',
]

__version__ = '1.0.0'
