"""Declarative database setup: tables, provisioning trigger, RLS policies, indexes and grants."""
from gcash_portal.schema.policies import POLICIES, Policy
from gcash_portal.schema.setup import render_setup_sql, setup_database, setup_statements

__all__ = ["POLICIES", "Policy", "render_setup_sql", "setup_database", "setup_statements"]
