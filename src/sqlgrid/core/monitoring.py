"""Sentry integration for error tracking.

Sentry is only initialized when a DSN is provided through the
SQLGRID_SENTRY_DSN environment variable.
"""

import os

import sentry_sdk

from sqlgrid.__about__ import __version__

SENTRY_DSN_ENV = "SQLGRID_SENTRY_DSN"


def setup_sentry(environment: str = "local") -> bool:
    """Initialize Sentry if configured. Returns True when enabled."""
    dsn = os.environ.get(SENTRY_DSN_ENV)
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.03,
        environment=environment,
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True
