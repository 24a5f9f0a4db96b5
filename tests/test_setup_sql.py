from unittest.mock import MagicMock

import pytest

from gcash_portal.schema import POLICIES, render_setup_sql, setup_database, setup_statements
from gcash_portal.schema.grants import grant_statements
from gcash_portal.schema.policies import RLS_TABLES
from gcash_portal.schema.trigger import create_function_sql, create_trigger_sql, drop_trigger_sql


@pytest.fixture(scope="module")
def script():
    return render_setup_sql()


def test_tables_are_created_if_missing(script):
    assert "CREATE TABLE IF NOT EXISTS public.profiles" in script
    assert "CREATE TABLE IF NOT EXISTS public.transactions" in script
    assert "REFERENCES auth.users (id) ON DELETE CASCADE" in script


def test_transaction_columns(script):
    assert "id BIGSERIAL NOT NULL" in script
    assert "amount NUMERIC(10, 2) NOT NULL" in script
    assert "total NUMERIC(10, 2) NOT NULL" in script
    assert "DEFAULT 'Completed'" in script
    assert "include_charge BOOLEAN DEFAULT false" in script
    assert "DEFAULT now()" in script


def test_indexes(script):
    assert "CREATE INDEX IF NOT EXISTS idx_transactions_user_email ON public.transactions (user_email);" in script
    assert "idx_transactions_date" in script
    assert "idx_transactions_type" in script
    assert "UNIQUE INDEX" not in script


def test_statement_order(script):
    positions = [
        script.index("CREATE TABLE IF NOT EXISTS public.profiles"),
        script.index("create or replace function public.handle_new_user()"),
        script.index("drop trigger if exists handle_new_user_trigger on auth.users;"),
        script.index("create trigger handle_new_user_trigger"),
        script.index("alter table public.profiles enable row level security;"),
        script.index('create policy "Users can view own profile"'),
        script.index("CREATE INDEX IF NOT EXISTS"),
        script.index("grant usage on schema public"),
    ]
    assert positions == sorted(positions)


def test_each_policy_is_dropped_before_created(script):
    drop = script.index('drop policy if exists "Users can view own transactions" on public.transactions;')
    create = script.index('create policy "Users can view own transactions" on public.transactions')
    assert drop < create


def test_policies_are_grouped_under_their_table():
    statements = [s for phase, s in setup_statements() if phase == "rls"]
    assert len(statements) == len(RLS_TABLES) + 2 * len(POLICIES)

    assert statements[0] == "alter table public.profiles enable row level security;"
    split = statements.index("alter table public.transactions enable row level security;")
    assert all("on public.profiles" in s for s in statements[1:split])
    assert all("on public.transactions" in s for s in statements[split + 1:])


def test_profiles_get_no_delete_policy(script):
    assert script.count("for delete") == 1
    assert "on public.transactions\n  for delete" in script


def test_trigger_function_never_blocks_signup():
    sql = create_function_sql()
    assert "insert into public.profiles (id, email, created_at)" in sql
    assert "values (new.id, new.email, now());" in sql
    assert "when unique_violation then\n    return new;" in sql
    assert "perform pg_notify('handle_new_user_error', 'Error creating profile for user: ' || new.id || ' - ' || sqlerrm);" in sql
    assert sql.count("return new;") == 3
    assert "security definer" in sql


def test_trigger_fires_after_insert_per_row():
    assert drop_trigger_sql() == "drop trigger if exists handle_new_user_trigger on auth.users;"
    assert create_trigger_sql() == (
        "create trigger handle_new_user_trigger\n"
        "after insert on auth.users\n"
        "for each row execute function public.handle_new_user();"
    )


def test_grants_for_default_roles():
    assert grant_statements() == [
        "grant usage on schema public to anon, authenticated;",
        "grant all on public.profiles to anon, authenticated;",
        "grant all on public.transactions to anon, authenticated;",
        "grant usage, select on all sequences in schema public to anon, authenticated;",
    ]


def test_grants_for_custom_roles():
    assert render_setup_sql(["authenticated"]).count("to authenticated;") == 4


def test_setup_refuses_non_postgres(engine):
    with pytest.raises(ValueError):
        setup_database(engine)


def test_setup_runs_every_statement_in_one_transaction():
    bind = MagicMock()
    bind.dialect.name = "postgresql"
    conn = bind.begin.return_value.__enter__.return_value

    count = setup_database(bind)

    steps = setup_statements()
    assert count == len(steps)
    bind.begin.assert_called_once()
    raw = [s for _, s in steps if isinstance(s, str)]
    assert conn.exec_driver_sql.call_count == len(raw)
    assert conn.execute.call_count == len(steps) - len(raw)
    assert conn.exec_driver_sql.call_args_list[-1].args[0] == raw[-1]
