"""Database schema, row-level security policies and owner-scoped API for the GCash Transaction Portal."""
