from typing import List, Optional

from gcash_portal.config import settings
from gcash_portal.models.constant import PUBLIC_SCHEMA

GRANTED_TABLES = ("profiles", "transactions")


def grant_statements(roles: Optional[List[str]] = None, schema: str = PUBLIC_SCHEMA) -> List[str]:
    """
    Table level grants for the application roles. Row access is narrowed
    further by the RLS policies, so these stay coarse.
    """
    grantees = ", ".join(roles or settings.get_app_roles())
    statements = [f"grant usage on schema {schema} to {grantees};"]
    statements += [f"grant all on {schema}.{table} to {grantees};" for table in GRANTED_TABLES]
    statements.append(f"grant usage, select on all sequences in schema {schema} to {grantees};")
    return statements
