import logging
from datetime import datetime, timezone, timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from models.tokens_blocklist import TokenBlocklist

logger = logging.getLogger(__name__)


# Delete any revoked-token entries older than the token lifetime,
# once a token has expired the blocklist entry is no longer needed
def cleanup_revoked_tokens():
    expires_delta = current_app.config.get("JWT_ACCESS_TOKEN_EXPIRES", timedelta(minutes = 60))
    cutoff = datetime.now(timezone.utc) - expires_delta

    deleted = TokenBlocklist.purge_revoked_before(cutoff)
    logger.info("Removed %s expired entries from the token blocklist", deleted)
    return deleted


# flask cleanup-revoked-tokens (run from a scheduler)
@click.command("cleanup-revoked-tokens")
@with_appcontext
def cleanup_revoked_tokens_command():
    deleted = cleanup_revoked_tokens()
    click.echo(f"Removed {deleted} revoked tokens")
