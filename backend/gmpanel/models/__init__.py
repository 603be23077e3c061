from gmpanel.db.base import Base
from gmpanel.models.audit_log import AuditLog
from gmpanel.models.role import Role
from gmpanel.models.user import User, user_roles
from gmpanel.models.user_device import UserDevice
from gmpanel.models.user_profile import UserProfile

__all__ = [
    "Base",
    "AuditLog",
    "Role",
    "User",
    "UserDevice",
    "UserProfile",
    "user_roles",
]
