"""Audit log of user actions.

Every controller action run by a user can be written to the audit log by the
``AuditBehavior`` attached to the controller. What gets written is decided by
sections: named groups of ``Info`` attributes. With::

    AUDIT_SECTIONS=user,controller,device

the record holds what is known about the user, the controller and the user's
device. The finished record is handed to the storage backend configured in
``AUDIT_STORAGE`` (database table, memory, ...).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from gmpanel.audit.context import AuditContext
from gmpanel.audit.exceptions import InvalidConfigError
from gmpanel.audit.info import Info
from gmpanel.audit.storage import AbstractStorage, create_storage
from gmpanel.core.i18n import Translator

logger = logging.getLogger(__name__)

DEFAULT_PROPERTIES: Dict[str, List[str]] = {
    "user": ["userId", "userName", "userDetail", "permission"],
    "controller": ["controllerName", "controllerAction", "controllerEvent"],
    "module": ["moduleId", "moduleName"],
    "device": ["browserName", "browserFamily", "osName", "osFamily"],
    "request": [
        "requestMethod",
        "requestCode",
        "requestUrl",
        "ipaddress",
        "query",
        "queryId",
        "date",
        "status",
        "success",
        "error",
        "errorCode",
        "errorParams",
        "note",
        "comment",
    ],
}


class Audit:
    def __init__(
        self,
        storage: Optional[Mapping[str, Any]],
        sections: Optional[Iterable[str]] = None,
        properties: Optional[Mapping[str, Iterable[str]]] = None,
        enabled: bool = True,
        context: Optional[AuditContext] = None,
        translator: Optional[Translator] = None,
        timezone: str = "UTC",
    ) -> None:
        if storage is None:
            raise InvalidConfigError("Audit storage configuration must be set.")
        self.storage = dict(storage)
        self.enabled = enabled
        self.sections: List[str] = list(sections or [])
        self.properties: Dict[str, List[str]] = {
            name: list(keys) for name, keys in DEFAULT_PROPERTIES.items()
        }
        for name, keys in (properties or {}).items():
            self.properties[name] = list(keys)
        self.info = Info(context, translator=translator, timezone=timezone)
        self._storage: Optional[AbstractStorage] = None

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> "Audit":
        return cls(
            storage=settings.AUDIT_STORAGE,
            sections=settings.AUDIT_SECTIONS,
            properties=settings.AUDIT_PROPERTIES,
            enabled=settings.AUDIT_ENABLED,
            timezone=settings.TIMEZONE,
            **kwargs,
        )

    def prepare(self, sections: Optional[Iterable[str]] = None) -> "Audit":
        """Resolve the attributes of ``sections`` (configured ones by default)."""
        names = list(sections or []) or self.sections
        for name in names:
            self.info.init_section(name)
            for key in self.properties.get(name, ()):
                self.info.define_property(key)
        return self

    def get_storage(self) -> AbstractStorage:
        if self._storage is None:
            self._storage = create_storage(self.storage)
        return self._storage

    def set_storage(self, storage: AbstractStorage) -> "Audit":
        self._storage = storage
        return self

    def has_section(self, name: str) -> bool:
        return name in self.sections

    def write(self) -> "Audit":
        if not self.enabled:
            return self

        self.prepare()
        attributes = self.info.all()
        self.get_storage().write(attributes)
        logger.debug(
            "audit record written controller=%s action=%s user_id=%s",
            attributes.get("controllerName"),
            attributes.get("controllerAction"),
            attributes.get("userId"),
        )
        return self
