"""Read-only snapshots of the request, response and user the audit reads from.

The audit core never talks to Starlette objects directly; the controller
route converts them once the action has completed.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# parameters whose values never reach the audit log
SECRET_PARAMS = frozenset(
    {"password", "current_password", "new_password", "access_token", "refresh_token", "token"}
)
REDACTED = "******"


@dataclass(frozen=True)
class Module:
    id: str
    name: Optional[str] = None


@dataclass(frozen=True)
class DeviceRecord:
    browser_name: Optional[str] = None
    browser_family: Optional[str] = None
    os_name: Optional[str] = None
    os_family: Optional[str] = None


@dataclass(frozen=True)
class ProfileRecord:
    call_name: Optional[str] = None


@dataclass
class UserIdentity:
    id: int
    username: str
    permission: Optional[str] = None
    profile: Optional[ProfileRecord] = None
    device: Optional[DeviceRecord] = None

    @classmethod
    def from_user(cls, user: Any) -> "UserIdentity":
        profile = getattr(user, "profile", None)
        device = getattr(user, "device", None)
        return cls(
            id=user.id,
            username=user.username,
            permission=getattr(user, "permission", None),
            profile=ProfileRecord(call_name=profile.call_name) if profile else None,
            device=(
                DeviceRecord(
                    browser_name=device.browser_name,
                    browser_family=device.browser_family,
                    os_name=device.os_name,
                    os_family=device.os_family,
                )
                if device
                else None
            ),
        )

    def get_profile(self) -> Optional[ProfileRecord]:
        return self.profile

    def get_device(self) -> Optional[DeviceRecord]:
        return self.device


@dataclass(frozen=True)
class RequestInfo:
    method: str = "GET"
    path: str = "/"
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    route_params: Dict[str, Any] = field(default_factory=dict)
    # matched endpoint, used when no controller handled the request
    endpoint_module: Optional[str] = None
    endpoint_name: Optional[str] = None

    @classmethod
    def from_request(
        cls, request: Request, body_params: Optional[Dict[str, Any]] = None
    ) -> "RequestInfo":
        params: Dict[str, Any] = dict(request.cookies)
        params.update(request.query_params)
        params.update(body_params or {})
        params.update(request.path_params)
        params = {
            name: REDACTED if name.lower() in SECRET_PARAMS else value
            for name, value in params.items()
        }
        endpoint = request.scope.get("endpoint")
        return cls(
            method=request.method,
            path=request.url.path,
            ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            params=params,
            route_params=dict(request.path_params),
            endpoint_module=getattr(endpoint, "__module__", None),
            endpoint_name=getattr(endpoint, "__name__", None),
        )


@dataclass(frozen=True)
class ResponseInfo:
    status_code: int = 200
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_response(cls, response: Response) -> "ResponseInfo":
        error = None
        if not 200 <= response.status_code < 300:
            error = _error_message(response)
        return cls(status_code=response.status_code, error=error)


def _error_message(response: Response) -> Optional[str]:
    body = getattr(response, "body", None)
    if not body or response.media_type != "application/json":
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        logger.debug("response body is not valid JSON, no error message taken")
        return None
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if detail is None or isinstance(detail, str):
        return detail
    return json.dumps(detail, ensure_ascii=False)


@dataclass
class AuditContext:
    """Everything known about one completed controller action."""

    request: Optional[RequestInfo] = None
    response: Optional[ResponseInfo] = None
    identity: Optional[UserIdentity] = None
    controller: Any = None

    @property
    def module(self) -> Optional[Module]:
        return getattr(self.controller, "module", None)


async def read_body_params(request: Request) -> Dict[str, Any]:
    """Fields of a JSON object or form body. Starlette keeps the parsed body
    on the request, so this does not read the stream a second time when the
    endpoint already consumed it.
    """
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    try:
        if content_type == "application/json":
            payload = await request.json()
            return dict(payload) if isinstance(payload, dict) else {}
        if content_type in FORM_CONTENT_TYPES:
            form = await request.form()
            # uploads are recorded by file name
            return {name: getattr(value, "filename", value) for name, value in form.items()}
    except (ValueError, StarletteHTTPException):
        logger.debug("request body could not be parsed, no body parameters taken")
    return {}
