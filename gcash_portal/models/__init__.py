from gcash_portal.models.auth_user import AuthUser
from gcash_portal.models.profile import Profile
from gcash_portal.models.transaction import Transaction

__all__ = ["AuthUser", "Profile", "Transaction"]
