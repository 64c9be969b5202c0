#!/usr/bin/env python3
"""
Command-line entry point
========================
Establishes (or reuses) an authenticated Carrefour account session and
persists its cookies for the next run.

Credentials come from ``--login`` / the ``CARREFOUR_LOGIN`` and
``CARREFOUR_PASSWORD`` env vars (a ``.env`` file is honoured) or an
interactive prompt.

Exit codes:
    0  authenticated
    1  LOGIN_FAILED
    2  CHALLENGE_ASKED (log in once by hand, then retry)

Run with: python -m connector
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .auth import (
    AuthenticationOrchestrator,
    CookieStore,
    Credentials,
    ErrorKind,
    resolve_credentials,
)
from .run_config import ConnectorRunConfig

logger = logging.getLogger(__name__)

EXIT_CODES = {
    None: 0,
    ErrorKind.LOGIN_FAILED: 1,
    ErrorKind.CHALLENGE_ASKED: 2,
}


def _load_env() -> None:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()  # tries CWD


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="connector",
        description="Authenticate against the Carrefour account provider.",
    )
    parser.add_argument("--login", help="Account e-mail (default: $CARREFOUR_LOGIN)")
    parser.add_argument(
        "--state-file",
        dest="state_file",
        help="Cookie state file (default: cookies.json)",
    )
    parser.add_argument(
        "--force-login",
        dest="force_login",
        action="store_true",
        help="Ignore the stored session and log in with credentials",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30,
        help="Per-request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--no-prompt",
        dest="interactive",
        action="store_false",
        help="Never prompt for missing credentials",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run(config: ConnectorRunConfig, creds: Credentials, session=None) -> int:
    """Run one authentication attempt and return the process exit code."""
    cookies = CookieStore()
    cookies.load(config.state_file)

    orchestrator = AuthenticationOrchestrator.from_config(config, cookies, session=session)
    try:
        outcome = orchestrator.ensure_authenticated(creds)
    finally:
        orchestrator.client.close()

    if outcome.authenticated:
        cookies.save(config.state_file)
        how = "reused stored session" if outcome.reused_session else "fresh login"
        logger.info(f"[IAM] Authenticated ({how})")
    else:
        logger.error(f"[IAM] Authentication failed: {outcome.reason.value}")
        if outcome.reason is ErrorKind.CHALLENGE_ASKED:
            logger.error("[IAM] The provider asked for a challenge, log in once in a browser")

    return EXIT_CODES[outcome.reason]


def main(argv=None) -> int:
    _load_env()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    config = ConnectorRunConfig.from_cli_args(args)
    config.log_summary()

    creds = resolve_credentials(
        Credentials(login=config.login or "", password=config.password or ""),
        interactive=args.interactive,
    )
    if not creds.is_complete:
        logger.error("[IAM] Credentials incomplete, set CARREFOUR_LOGIN / CARREFOUR_PASSWORD")
        return EXIT_CODES[ErrorKind.LOGIN_FAILED]

    return run(config, creds)


if __name__ == "__main__":
    sys.exit(main())
