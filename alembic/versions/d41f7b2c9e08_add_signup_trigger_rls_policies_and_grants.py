"""add signup trigger, rls policies and grants

Revision ID: d41f7b2c9e08
Revises: a3c81f0d5e27
Create Date: 2026-10-18 10:47:52.604971

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = 'd41f7b2c9e08'
down_revision: Union[str, Sequence[str], None] = 'a3c81f0d5e27'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OWNS_PROFILE = "auth.uid() = id"
OWNS_TRANSACTION = "auth.jwt() ->> 'email' = user_email"

POLICIES = [
    ("Users can view own profile", "profiles", "select", f"using ({OWNS_PROFILE})"),
    ("Users can insert own profile", "profiles", "insert", f"with check ({OWNS_PROFILE})"),
    ("Users can update own profile", "profiles", "update", f"using ({OWNS_PROFILE})"),
    ("Users can view own transactions", "transactions", "select", f"using ({OWNS_TRANSACTION})"),
    ("Users can insert own transactions", "transactions", "insert", f"with check ({OWNS_TRANSACTION})"),
    ("Users can update own transactions", "transactions", "update", f"using ({OWNS_TRANSACTION})"),
    ("Users can delete own transactions", "transactions", "delete", f"using ({OWNS_TRANSACTION})"),
]


def upgrade() -> None:
    """Upgrade schema."""
    # Profile provisioning for new auth users; never blocks the signup
    op.execute(
        """
        create or replace function public.handle_new_user()
        returns trigger as $$
        begin
          insert into public.profiles (id, email, created_at)
          values (new.id, new.email, now());
          return new;
        exception
          when unique_violation then
            return new;
          when others then
            perform pg_notify('handle_new_user_error', 'Error creating profile for user: ' || new.id || ' - ' || sqlerrm);
            return new;
        end;
        $$ language plpgsql security definer set search_path = public
        """
    )
    op.execute("drop trigger if exists handle_new_user_trigger on auth.users")
    op.execute(
        """
        create trigger handle_new_user_trigger
        after insert on auth.users
        for each row execute function public.handle_new_user()
        """
    )

    op.execute("alter table public.profiles enable row level security")
    op.execute("alter table public.transactions enable row level security")
    for name, table, command, predicate in POLICIES:
        op.execute(f'drop policy if exists "{name}" on public.{table}')
        op.execute(f'create policy "{name}" on public.{table} for {command} {predicate}')

    op.execute("grant usage on schema public to anon, authenticated")
    op.execute("grant all on public.profiles to anon, authenticated")
    op.execute("grant all on public.transactions to anon, authenticated")
    op.execute("grant usage, select on all sequences in schema public to anon, authenticated")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("revoke usage, select on all sequences in schema public from anon, authenticated")
    op.execute("revoke all on public.transactions from anon, authenticated")
    op.execute("revoke all on public.profiles from anon, authenticated")

    for name, table, _, _ in reversed(POLICIES):
        op.execute(f'drop policy if exists "{name}" on public.{table}')
    op.execute("alter table public.transactions disable row level security")
    op.execute("alter table public.profiles disable row level security")

    op.execute("drop trigger if exists handle_new_user_trigger on auth.users")
    op.execute("drop function if exists public.handle_new_user()")
