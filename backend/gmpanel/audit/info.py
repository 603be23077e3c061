"""Attributes of one audit event.

``Info`` resolves attributes by name on demand and keeps what it resolved:
an attribute that is already set is never recomputed, and an attribute that
resolves to ``None`` is left out of the event. Every attribute has an explicit
provider registered in ``Info.providers``; a name without a provider simply
resolves to ``None``.

Attributes with providers:

- ``userId``, ``userName``, ``userDetail``, ``permission``
- ``ipaddress``
- ``moduleId``, ``moduleName``
- ``controllerName``, ``controllerAction``, ``controllerEvent``
- ``browserName``, ``browserFamily``, ``osName``, ``osFamily``
- ``requestUrl``, ``requestMethod``, ``requestCode``
- ``queryId``, ``query``
- ``success``, ``error``, ``errorCode``
- ``comment``, ``date``
"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo

from gmpanel.audit.context import AuditContext, DeviceRecord, ProfileRecord
from gmpanel.core import browser
from gmpanel.core.i18n import BACKEND, SYMBOL_NONAME, Translator

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

COMMENT_TEMPLATE = (
    "{profile} at user account {user} use: {action} from module {module} "
    "at {date} from {ipaddress}"
)

# written when the controller has no description for the action
UNKNOWN_ACTION = "unknow"

QUERY_VALUE_LENGTH = 256
QUERY_ID_LENGTH = 100

CommentCallback = Callable[["Info"], Optional[str]]


NUMERIC_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _is_numeric(value: str) -> bool:
    return NUMERIC_RE.fullmatch(value.strip()) is not None


class Info:
    def __init__(
        self,
        context: Optional[AuditContext] = None,
        translator: Optional[Translator] = None,
        timezone: str = "UTC",
    ) -> None:
        self.context = context or AuditContext()
        self.translator = translator or Translator()
        self.timezone = timezone
        self.comment_callback: Optional[CommentCallback] = None
        self.unknown = self.translator.translate("<unknown>")

        self._attributes: Dict[str, Any] = {}
        self._attempted: set[str] = set()
        self._sections: set[str] = set()
        self._profile: Optional[ProfileRecord] = None
        self._device: Optional[DeviceRecord] = None
        self._detected: Optional[browser.BrowserInfo] = None

        self.providers: Dict[str, Callable[[], Any]] = {
            "userId": self.get_user_id,
            "userName": self.get_user_name,
            "userDetail": self.get_user_detail,
            "permission": self.get_permission,
            "ipaddress": self.get_ipaddress,
            "moduleId": self.get_module_id,
            "moduleName": self.get_module_name,
            "controllerName": self.get_controller_name,
            "controllerAction": self.get_controller_action,
            "controllerEvent": self.get_controller_event,
            "browserName": self.get_browser_name,
            "browserFamily": self.get_browser_family,
            "osName": self.get_os_name,
            "osFamily": self.get_os_family,
            "requestUrl": self.get_request_url,
            "requestMethod": self.get_request_method,
            "requestCode": self.get_request_code,
            "queryId": self.get_query_id,
            "query": self.get_query,
            "success": self.get_success,
            "error": self.get_error,
            "errorCode": self.get_error_code,
            "comment": self.get_comment,
            "date": self.get_date,
        }
        self.section_initializers: Dict[str, Callable[[], None]] = {
            "user": self.user_section,
            "device": self.device_section,
        }

    # -- attribute storage -------------------------------------------------

    def __contains__(self, name: str) -> bool:
        return name in self._attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    def all(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def define_property(self, name: str) -> Any:
        """Resolve ``name`` once and keep the value unless it is ``None``."""
        if name in self._attributes:
            return self._attributes[name]
        if name in self._attempted:
            return None
        self._attempted.add(name)

        value = None
        provider = self.providers.get(name)
        if provider is not None:
            try:
                value = provider()
            except Exception:
                logger.warning("audit attribute %s could not be resolved", name, exc_info=True)
                value = None
        if value is not None:
            self._attributes[name] = value
        return value

    def init_section(self, name: str) -> None:
        if name in self._sections:
            return
        self._sections.add(name)
        initializer = self.section_initializers.get(name)
        if initializer is not None:
            initializer()

    def set_error(self, message: str, params: Any = None) -> None:
        self._attributes["success"] = 0
        self._attributes["error"] = message
        self._attributes["errorParams"] = params

    # -- sections ----------------------------------------------------------

    def user_section(self) -> None:
        identity = self.context.identity
        if identity is not None:
            self._profile = identity.get_profile()

    def device_section(self) -> None:
        identity = self.context.identity
        if identity is not None:
            self._device = identity.get_device()

    # -- user --------------------------------------------------------------

    def get_user_id(self) -> Optional[int]:
        identity = self.context.identity
        return identity.id if identity else None

    def get_user_name(self) -> Optional[str]:
        identity = self.context.identity
        return identity.username if identity else None

    def get_user_detail(self) -> Optional[str]:
        self.init_section("user")
        return self._profile.call_name if self._profile else None

    def get_permission(self) -> Optional[str]:
        identity = self.context.identity
        return identity.permission if identity else None

    def get_ipaddress(self) -> Optional[str]:
        request = self.context.request
        return request.ip if request else None

    # -- module ------------------------------------------------------------

    def get_module_id(self) -> Optional[str]:
        module = self.context.module
        return module.id if module else None

    def get_module_name(self) -> Optional[str]:
        module = self.context.module
        if module is None or not module.id:
            return None
        name = self.translator.translate("{name}", category=module.id)
        if name == "{name}":
            name = module.name or SYMBOL_NONAME
        return name

    # -- controller --------------------------------------------------------

    def get_controller_name(self) -> Optional[str]:
        controller = self.context.controller
        if controller is not None:
            return type(controller).__name__
        request = self.context.request
        if request and request.endpoint_module:
            return request.endpoint_module.rsplit(".", 1)[-1]
        return None

    def get_controller_action(self) -> Optional[str]:
        controller = self.context.controller
        if controller is not None:
            return str(controller.action or "")
        request = self.context.request
        return request.endpoint_name if request else None

    def get_controller_event(self) -> Optional[str]:
        controller = self.context.controller
        if controller is not None:
            cls = type(controller)
            return f"{cls.__module__}.{cls.__qualname__}::{controller.action}"
        request = self.context.request
        if request and request.endpoint_name:
            return f"{request.endpoint_module}::{request.endpoint_name}"
        return None

    # -- device ------------------------------------------------------------

    def _detect(self) -> browser.BrowserInfo:
        if self._detected is None:
            request = self.context.request
            self._detected = browser.detect(request.user_agent if request else None)
        return self._detected

    def get_browser_name(self) -> Optional[str]:
        self.init_section("device")
        if self._device is not None:
            return self._device.browser_name
        return self._detect().browser_name

    def get_browser_family(self) -> Optional[str]:
        self.init_section("device")
        if self._device is not None:
            return self._device.browser_family
        return self._detect().browser_family

    def get_os_name(self) -> Optional[str]:
        self.init_section("device")
        if self._device is not None:
            return self._device.os_name
        return self._detect().os_name

    def get_os_family(self) -> Optional[str]:
        self.init_section("device")
        if self._device is not None:
            return self._device.os_family
        return self._detect().os_family

    # -- request -----------------------------------------------------------

    def get_request_url(self) -> Optional[str]:
        request = self.context.request
        return request.path if request else None

    def get_request_method(self) -> Optional[str]:
        request = self.context.request
        return request.method if request else None

    def get_request_code(self) -> Optional[int]:
        response = self.context.response
        return response.status_code if response else None

    def get_query_id(self) -> Any:
        controller = self.context.controller
        if controller is None:
            return 0

        model = getattr(controller, "last_data_model", None)
        get_identifier = getattr(model, "get_identifier", None)
        if callable(get_identifier):
            identifier = get_identifier()
            if identifier is None:
                identifier = ""
            elif isinstance(identifier, (dict, list, tuple)):
                identifier = json.dumps(identifier, ensure_ascii=False)
            else:
                identifier = str(identifier)
            if not _is_numeric(identifier):
                identifier = identifier[:QUERY_ID_LENGTH]
            return identifier

        # no data model was used, take the record id from the route
        request = self.context.request
        route_id = request.route_params.get("id", 0) if request else 0
        try:
            return int(route_id)
        except (TypeError, ValueError):
            return 0

    def get_query(self) -> Optional[str]:
        request = self.context.request
        if request is None or not request.params:
            return None
        return "\n".join(
            f'{name} = "{str(value)[:QUERY_VALUE_LENGTH]}"'
            for name, value in request.params.items()
        )

    def get_success(self) -> int:
        response = self.context.response
        if response is None:
            return 0
        return int(response.success)

    def get_error(self) -> Optional[str]:
        response = self.context.response
        if response is not None and not response.success:
            return response.error
        return None

    def get_error_code(self) -> Optional[int]:
        response = self.context.response
        if response is not None and not response.success:
            return response.status_code
        return None

    def get_date(self) -> str:
        return datetime.now(ZoneInfo(self.timezone)).strftime(DATE_FORMAT)

    # -- comment -----------------------------------------------------------

    def get_comment_action(self) -> str:
        description = ""
        controller = self.context.controller
        if controller is not None:
            description = controller.translate_action(self.translator) or ""
        return description or UNKNOWN_ACTION

    def _peek(self, name: str) -> Any:
        """Value of ``name`` without adding it to the event."""
        if name in self._attributes:
            return self._attributes[name]
        provider = self.providers.get(name)
        return provider() if provider else None

    def get_comment(self) -> Optional[str]:
        if self.comment_callback is not None:
            return self.comment_callback(self)

        date = self.get("date")
        return self.translator.translate(
            COMMENT_TEMPLATE,
            {
                "profile": self.get("userDetail") or self.unknown,
                "user": self.get("userName") or self.unknown,
                "action": self.get_comment_action(),
                "module": self.get("moduleName") or "",
                "date": f"{date} ({self.timezone})" if date else self.unknown,
                "ipaddress": self.get("ipaddress") or self.unknown,
                "browser": self._peek("browserName") or self.unknown,
                "os": self._peek("osName") or self.unknown,
            },
            category=BACKEND,
        )
