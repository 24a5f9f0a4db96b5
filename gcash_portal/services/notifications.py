"""
Error channel for profile provisioning.

The handle_new_user() trigger publishes failures with pg_notify; the Python
provisioning path publishes the same message on the same channel. Nothing in
the request path waits on a subscriber.
"""
import logging
import select

from sqlalchemy import text

from gcash_portal.config import settings

logger = logging.getLogger(__name__)


def sqlerrm(error) -> str:
    """First line of the driver's message, like sqlerrm inside plpgsql."""
    message = str(getattr(error, "orig", None) or error).strip()
    return message.splitlines()[0] if message else type(error).__name__


def format_provisioning_error(user_id, error) -> str:
    return f"Error creating profile for user: {user_id} - {sqlerrm(error)}"


def publish_provisioning_error(bind, user_id, error, channel: str = settings.PROFILE_ERROR_CHANNEL) -> str:
    message = format_provisioning_error(user_id, error)
    logger.error(message)

    engine = getattr(bind, "engine", bind)
    if engine.dialect.name != "postgresql":
        return message
    # Separate connection: the caller's transaction is usually already aborted
    try:
        with engine.connect() as conn:
            conn.execute(text("select pg_notify(:channel, :payload)"), {"channel": channel, "payload": message})
            conn.commit()
    except Exception as e:  # pylint: disable=broad-except
        logger.warning(f"Could not publish on {channel}: {e}")
    return message


def log_provisioning_error(payload: str) -> None:
    logger.error(f"handle_new_user failed: {payload}")


def drain_notifications(dbapi_conn, handler) -> int:
    """Hand every pending notification on a psycopg2 connection to handler."""
    dbapi_conn.poll()
    handled = 0
    while dbapi_conn.notifies:
        notify = dbapi_conn.notifies.pop(0)
        handler(notify.payload)
        handled += 1
    return handled


def listen_for_provisioning_errors(engine, handler=log_provisioning_error, timeout: float = 5.0,
                                   channel: str = settings.PROFILE_ERROR_CHANNEL, should_stop=None) -> int:
    """
    Block on LISTEN <channel> and pass each payload to handler.

    Runs until should_stop() returns True (forever when not given). Returns
    the number of notifications handled.
    """
    if engine.dialect.name != "postgresql":
        raise ValueError(f"LISTEN requires PostgreSQL, got {engine.dialect.name}")

    raw = engine.raw_connection()
    handled = 0
    try:
        dbapi_conn = raw.driver_connection
        dbapi_conn.autocommit = True
        cursor = dbapi_conn.cursor()
        cursor.execute(f"LISTEN {engine.dialect.identifier_preparer.quote(channel)}")
        logger.info(f"Listening on {channel}")

        while should_stop is None or not should_stop():
            if select.select([dbapi_conn], [], [], timeout) == ([], [], []):
                continue
            handled += drain_notifications(dbapi_conn, handler)
    finally:
        raw.close()
    return handled
