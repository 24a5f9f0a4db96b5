"""CLI entry points for applying and maintaining the database setup."""
import logging
import subprocess
import sys
from pathlib import Path

from gcash_portal.config import settings

# Project root: .../gcash_portal/cli.py -> project root
_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _configure_logging() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def setup_db() -> None:
    """Apply tables, trigger, policies, indexes and grants to DATABASE_URL."""
    from gcash_portal.schema import setup_database

    _configure_logging()
    setup_database()


def print_sql() -> None:
    """Print the setup as a SQL script. Extra args are the roles to grant to."""
    from gcash_portal.schema import render_setup_sql

    roles = sys.argv[1:] or None
    sys.stdout.write(render_setup_sql(roles))


def backfill() -> None:
    """Create missing profiles for identities that existed before the trigger."""
    from gcash_portal.database import SessionLocal
    from gcash_portal.services.provisioning import backfill_profiles

    _configure_logging()
    db = SessionLocal()
    try:
        count = backfill_profiles(db)
    finally:
        db.close()
    print(f"Provisioned {count} profile(s)")


def listen_errors() -> None:
    """Log every message the provisioning trigger publishes on its error channel."""
    from gcash_portal.database import engine
    from gcash_portal.services.notifications import listen_for_provisioning_errors

    _configure_logging()
    try:
        listen_for_provisioning_errors(engine)
    except KeyboardInterrupt:
        pass


def migrate() -> None:
    """Run alembic upgrade head. Pass a revision as first arg to upgrade to that instead."""
    revision = sys.argv[1] if len(sys.argv) > 1 else "head"
    subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", revision, *sys.argv[2:]],
        cwd=_PROJECT_ROOT,
        check=True,
    )
