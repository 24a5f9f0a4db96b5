AUTH_SCHEMA = "auth"
PUBLIC_SCHEMA = "public"

DEFAULT_TRANSACTION_STATUS = "Completed"
