class AuditError(Exception):
    """Base class for audit subsystem errors."""


class InvalidConfigError(AuditError):
    """Raised when the audit configuration is missing or malformed."""
