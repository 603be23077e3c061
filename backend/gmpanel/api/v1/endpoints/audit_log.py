from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from gmpanel.audit import AbstractStorage, AuditBehavior, Module, create_storage
from gmpanel.controller.base import BaseController, get_controller
from gmpanel.core.config import settings
from gmpanel.core.security import require_roles
from gmpanel.db.session import get_db
from gmpanel.schemas.audit_log import AuditLogOut, AuditLogPage
from gmpanel.services.audit_log import get_audit_record, list_audit_records


class AuditLogController(BaseController):
    module = Module("audit", "Audit log")
    action_descriptions = {
        "list_audit_log": "view audit log",
        "get_audit_log": "view audit log record",
        "clear_audit_log": "clear audit log",
    }

    def behaviors(self):
        # reading the log is not an action worth logging
        return {
            "audit": AuditBehavior(
                deny={"list_audit_log", "get_audit_log"},
                enabled=self.enable_audit,
            )
        }


router = AuditLogController.router()


def get_audit_storage(request: Request) -> AbstractStorage:
    storage = getattr(request.app.state, "audit_storage", None)
    if storage is None:
        storage = create_storage(settings.AUDIT_STORAGE)
        request.app.state.audit_storage = storage
    return storage


@router.get("", response_model=AuditLogPage)
def list_audit_log(
    db: Session = Depends(get_db),
    _user=Depends(require_roles("ADMIN")),
    user_id: Optional[int] = Query(default=None),
    controller_name: Optional[str] = Query(default=None),
    success: Optional[int] = Query(default=None, ge=0, le=1),
    limit: int = Query(default=50, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> AuditLogPage:
    rows, total = list_audit_records(
        db,
        user_id=user_id,
        controller_name=controller_name,
        success=success,
        limit=limit,
        offset=offset,
    )
    return AuditLogPage(
        items=[AuditLogOut.model_validate(row) for row in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{id}", response_model=AuditLogOut)
def get_audit_log(
    id: int,
    db: Session = Depends(get_db),
    _user=Depends(require_roles("ADMIN")),
    controller: BaseController = Depends(get_controller),
) -> AuditLogOut:
    record = get_audit_record(db, id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Audit record not found",
        )
    controller.use_data_model(record)
    return AuditLogOut.model_validate(record)


@router.delete("")
def clear_audit_log(
    _user=Depends(require_roles("ADMIN")),
    storage: AbstractStorage = Depends(get_audit_storage),
) -> dict:
    storage.clear()
    return {"status": "ok"}
