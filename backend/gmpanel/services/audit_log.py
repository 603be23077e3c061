from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gmpanel.models.audit_log import AuditLog


def list_audit_records(
    db: Session,
    *,
    user_id: int | None = None,
    controller_name: str | None = None,
    success: int | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[AuditLog], int]:
    stmt = select(AuditLog)
    if user_id is not None:
        stmt = stmt.where(AuditLog.user_id == user_id)
    if controller_name:
        stmt = stmt.where(AuditLog.controller_name == controller_name)
    if success is not None:
        stmt = stmt.where(AuditLog.success == success)

    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    rows = db.execute(stmt.order_by(AuditLog.id.desc()).offset(offset).limit(limit)).scalars().all()
    return list(rows), int(total)


def get_audit_record(db: Session, record_id: int) -> AuditLog | None:
    return db.get(AuditLog, record_id)
