from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    user_detail: Optional[str] = None
    user_permission: Optional[str] = None
    user_ipaddress: Optional[str] = None
    module_id: Optional[str] = None
    module_name: Optional[str] = None
    controller_name: Optional[str] = None
    controller_action: Optional[str] = None
    controller_event: Optional[str] = None
    meta_browser_name: Optional[str] = None
    meta_browser_family: Optional[str] = None
    meta_os_name: Optional[str] = None
    meta_os_family: Optional[str] = None
    request_url: Optional[str] = None
    request_method: Optional[str] = None
    request_code: Optional[int] = None
    query_sql: Optional[str] = None
    query_id: Optional[str] = None
    query_params: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[int] = None
    error_params: Optional[Any] = None
    success: Optional[int] = None
    comment: Optional[str] = None
    date: Optional[str] = None


class AuditLogPage(BaseModel):
    items: List[AuditLogOut]
    total: int
    limit: int
    offset: int
