"""
Row level security policies for profiles and transactions.

The predicates are evaluated by Postgres on every row access; this module only
declares them. auth.uid() and auth.jwt() are Supabase helpers that read the
caller's token claims from the current transaction.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from gcash_portal.models.constant import PUBLIC_SCHEMA

COMMANDS = ("select", "insert", "update", "delete", "all")

OWNS_PROFILE = "auth.uid() = id"
OWNS_TRANSACTION = "auth.jwt() ->> 'email' = user_email"


@dataclass(frozen=True)
class Policy:
    name: str
    table: str
    command: str
    using: Optional[str] = None
    with_check: Optional[str] = None

    def __post_init__(self):
        if self.command not in COMMANDS:
            raise ValueError(f"Unknown policy command: {self.command}")
        if self.using is None and self.with_check is None:
            raise ValueError(f"Policy {self.name!r} needs a using or with check expression")
        # Postgres only accepts WITH CHECK for insert and only USING for select/delete
        if self.command == "insert" and self.using is not None:
            raise ValueError("insert policies only take a with check expression")
        if self.command in ("select", "delete") and self.with_check is not None:
            raise ValueError(f"{self.command} policies only take a using expression")

    def qualified_table(self, schema: str = PUBLIC_SCHEMA) -> str:
        return f"{schema}.{self.table}"

    def create_sql(self, schema: str = PUBLIC_SCHEMA) -> str:
        sql = f'create policy "{self.name}" on {self.qualified_table(schema)}\n  for {self.command}'
        if self.using is not None:
            sql += f" using ({self.using})"
        if self.with_check is not None:
            sql += f" with check ({self.with_check})"
        return sql + ";"

    def drop_sql(self, schema: str = PUBLIC_SCHEMA) -> str:
        return f'drop policy if exists "{self.name}" on {self.qualified_table(schema)};'


# Profiles have no delete policy: rows only go away through the auth.users cascade
PROFILE_POLICIES: Tuple[Policy, ...] = (
    Policy("Users can view own profile", "profiles", "select", using=OWNS_PROFILE),
    Policy("Users can insert own profile", "profiles", "insert", with_check=OWNS_PROFILE),
    Policy("Users can update own profile", "profiles", "update", using=OWNS_PROFILE),
)

TRANSACTION_POLICIES: Tuple[Policy, ...] = (
    Policy("Users can view own transactions", "transactions", "select", using=OWNS_TRANSACTION),
    Policy("Users can insert own transactions", "transactions", "insert", with_check=OWNS_TRANSACTION),
    Policy("Users can update own transactions", "transactions", "update", using=OWNS_TRANSACTION),
    Policy("Users can delete own transactions", "transactions", "delete", using=OWNS_TRANSACTION),
)

POLICIES: Tuple[Policy, ...] = PROFILE_POLICIES + TRANSACTION_POLICIES

RLS_TABLES = ("profiles", "transactions")


def enable_rls_sql(table: str, schema: str = PUBLIC_SCHEMA) -> str:
    return f"alter table {schema}.{table} enable row level security;"


def policies_for(table: str) -> Tuple[Policy, ...]:
    return tuple(p for p in POLICIES if p.table == table)
