"""New-identity provisioning: a trigger on auth.users that creates the matching profile row."""
from gcash_portal.config import settings
from gcash_portal.models.constant import AUTH_SCHEMA, PUBLIC_SCHEMA

FUNCTION_NAME = f"{PUBLIC_SCHEMA}.handle_new_user"
TRIGGER_NAME = "handle_new_user_trigger"
IDENTITY_TABLE = f"{AUTH_SCHEMA}.users"


def create_function_sql(channel: str = settings.PROFILE_ERROR_CHANNEL) -> str:
    # Never raises: identity creation must not fail because of the profile
    return f"""create or replace function {FUNCTION_NAME}()
returns trigger as $$
begin
  insert into {PUBLIC_SCHEMA}.profiles (id, email, created_at)
  values (new.id, new.email, now());
  return new;
exception
  when unique_violation then
    return new;
  when others then
    perform pg_notify('{channel}', 'Error creating profile for user: ' || new.id || ' - ' || sqlerrm);
    return new;
end;
$$ language plpgsql security definer set search_path = {PUBLIC_SCHEMA};"""


def drop_trigger_sql() -> str:
    return f"drop trigger if exists {TRIGGER_NAME} on {IDENTITY_TABLE};"


def create_trigger_sql() -> str:
    return (
        f"create trigger {TRIGGER_NAME}\n"
        f"after insert on {IDENTITY_TABLE}\n"
        f"for each row execute function {FUNCTION_NAME}();"
    )
