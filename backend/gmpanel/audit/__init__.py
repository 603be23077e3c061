from gmpanel.audit.behavior import AuditBehavior
from gmpanel.audit.context import (
    AuditContext,
    DeviceRecord,
    Module,
    ProfileRecord,
    RequestInfo,
    ResponseInfo,
    UserIdentity,
    read_body_params,
)
from gmpanel.audit.exceptions import AuditError, InvalidConfigError
from gmpanel.audit.info import Info
from gmpanel.audit.service import DEFAULT_PROPERTIES, Audit
from gmpanel.audit.storage import AbstractStorage, DbStorage, MemoryStorage, create_storage

__all__ = [
    "AbstractStorage",
    "Audit",
    "AuditBehavior",
    "AuditContext",
    "AuditError",
    "DEFAULT_PROPERTIES",
    "DbStorage",
    "DeviceRecord",
    "Info",
    "InvalidConfigError",
    "MemoryStorage",
    "Module",
    "ProfileRecord",
    "RequestInfo",
    "ResponseInfo",
    "UserIdentity",
    "create_storage",
    "read_body_params",
]
