from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy import MetaData, Table, delete, insert, text
from sqlalchemy.orm import Session

from gmpanel.audit.storage.base import AbstractStorage
from gmpanel.models.audit_log import AuditLog

logger = logging.getLogger(__name__)

# attribute name -> column of the audit table
AUDIT_FIELDS: Dict[str, str] = {
    "userId": "user_id",
    "userName": "user_name",
    "userDetail": "user_detail",
    "permission": "user_permission",
    "ipaddress": "user_ipaddress",
    "moduleId": "module_id",
    "moduleName": "module_name",
    "controllerName": "controller_name",
    "controllerAction": "controller_action",
    "controllerEvent": "controller_event",
    "browserName": "meta_browser_name",
    "browserFamily": "meta_browser_family",
    "osName": "meta_os_name",
    "osFamily": "meta_os_family",
    "requestUrl": "request_url",
    "requestMethod": "request_method",
    "requestCode": "request_code",
    "querySql": "query_sql",
    "queryId": "query_id",
    "query": "query_params",
    "error": "error",
    "errorCode": "error_code",
    "errorParams": "error_params",
    "success": "success",
    "comment": "comment",
    "date": "date",
}


def _default_session_factory() -> Session:
    from gmpanel.db.session import SessionLocal

    return SessionLocal()


def audit_table(table_name: str) -> Table:
    default = AuditLog.__table__
    if table_name == default.name:
        return default
    return default.to_metadata(MetaData(), name=table_name)


class DbStorage(AbstractStorage):
    """Audit records as rows of a database table."""

    def __init__(
        self,
        table_name: str = "audit",
        limit: int = 1000,
        session_factory: Optional[Callable[[], Session]] = None,
    ) -> None:
        super().__init__(limit=limit)
        self.table_name = table_name
        self.table = audit_table(table_name)
        self.session_factory = session_factory or _default_session_factory

    def masked_attributes(self) -> Dict[str, str]:
        return dict(AUDIT_FIELDS)

    def fit_columns(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Cut string values to the width of their column."""
        fitted = {}
        for name, value in record.items():
            column = self.table.c.get(name)
            length = getattr(column.type, "length", None) if column is not None else None
            if length and isinstance(value, str) and len(value) > length:
                logger.debug("audit value cut to column width column=%s length=%s", name, length)
                value = value[:length]
            fitted[name] = value
        return fitted

    def clear(self) -> None:
        db = self.session_factory()
        try:
            result = db.execute(delete(self.table))
            self._reset_sequence(db)
            db.commit()
        finally:
            db.close()
        logger.info("audit log cleared table=%s rows=%s", self.table_name, result.rowcount)
        super().clear()

    def _reset_sequence(self, db: Session) -> None:
        dialect = db.get_bind().dialect.name
        name = self.table_name
        if dialect == "sqlite":
            # sqlite_sequence is created together with the AUTOINCREMENT table
            db.execute(text("DELETE FROM sqlite_sequence WHERE name = :name"), {"name": name})
        elif dialect == "postgresql":
            db.execute(
                text("SELECT setval(pg_get_serial_sequence(:name, 'id'), 1, false)"),
                {"name": name},
            )
        elif dialect in {"mysql", "mariadb"}:
            db.execute(text(f"ALTER TABLE `{name}` AUTO_INCREMENT = 1"))

    def write(self, attributes: Optional[Mapping[str, Any]] = None) -> None:
        record = self.unmasked_attributes(attributes or {})
        if not record:
            return
        record = self.fit_columns(record)
        db = self.session_factory()
        try:
            result = db.execute(insert(self.table).values(**record))
            db.commit()
            self.index = int(result.inserted_primary_key[0])
        finally:
            db.close()
        if self.has_limit_rows():
            self.clear()
