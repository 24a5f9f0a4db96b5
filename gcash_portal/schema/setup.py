"""
Ordered database setup for the portal.

Applies, in one transaction:
  1) the profiles and transactions tables
  2) the handle_new_user() function and its trigger on auth.users
  3) row level security and the owner policies
  4) indexes on transactions
  5) grants for the anon and authenticated roles

Every step can be re-run: tables and indexes use IF NOT EXISTS, the function
is replaced, the trigger and policies are dropped before being created.
"""
import logging
from typing import List, Optional, Tuple, Union

from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable, DDLElement

from gcash_portal.database import engine as default_engine
from gcash_portal.models import Profile, Transaction
from gcash_portal.schema.grants import grant_statements
from gcash_portal.schema.policies import RLS_TABLES, enable_rls_sql, policies_for
from gcash_portal.schema.trigger import create_function_sql, create_trigger_sql, drop_trigger_sql

logger = logging.getLogger(__name__)

SETUP_TABLES = (Profile.__table__, Transaction.__table__)

Statement = Union[str, DDLElement]


def setup_statements(roles: Optional[List[str]] = None) -> List[Tuple[str, Statement]]:
    """Return (phase, statement) pairs in the order they must run."""
    steps: List[Tuple[str, Statement]] = []
    for table in SETUP_TABLES:
        steps.append(("tables", CreateTable(table, if_not_exists=True)))

    steps.append(("trigger", create_function_sql()))
    steps.append(("trigger", drop_trigger_sql()))
    steps.append(("trigger", create_trigger_sql()))

    for table in RLS_TABLES:
        steps.append(("rls", enable_rls_sql(table)))
        for policy in policies_for(table):
            steps.append(("rls", policy.drop_sql()))
            steps.append(("rls", policy.create_sql()))

    for table in SETUP_TABLES:
        for index in sorted(table.indexes, key=lambda i: i.name):
            steps.append(("indexes", CreateIndex(index, if_not_exists=True)))

    for statement in grant_statements(roles):
        steps.append(("grants", statement))
    return steps


def _render(statement: Statement) -> str:
    if isinstance(statement, str):
        return statement
    return str(statement.compile(dialect=postgresql.dialect())).strip() + ";"


def render_setup_sql(roles: Optional[List[str]] = None) -> str:
    """The whole setup as a Postgres script, e.g. for the Supabase SQL editor."""
    lines = ["-- GCash Transaction Portal Database Setup"]
    phase = None
    for step, statement in setup_statements(roles):
        if step != phase:
            lines.append("")
            lines.append(f"-- {step}")
            phase = step
        lines.append(_render(statement))
    return "\n".join(lines) + "\n"


def setup_database(bind=None, roles: Optional[List[str]] = None) -> int:
    """Apply the setup to a Postgres database. Returns the number of statements run."""
    bind = bind if bind is not None else default_engine
    if bind.dialect.name != "postgresql":
        raise ValueError(f"Database setup requires PostgreSQL, got {bind.dialect.name}")

    count = 0
    phase = None
    with bind.begin() as conn:
        for step, statement in setup_statements(roles):
            if step != phase:
                logger.info(f"Applying {step}")
                phase = step
            if isinstance(statement, str):
                conn.exec_driver_sql(statement)
            else:
                conn.execute(statement)
            count += 1
    logger.info(f"Database setup complete ({count} statements)")
    return count
