from __future__ import annotations

from importlib import import_module
from typing import Any, Mapping

from gmpanel.audit.exceptions import InvalidConfigError
from gmpanel.audit.storage.base import AbstractStorage
from gmpanel.audit.storage.db import AUDIT_FIELDS, DbStorage
from gmpanel.audit.storage.memory import MemoryStorage

STORAGE_CLASSES = {
    "db": DbStorage,
    "memory": MemoryStorage,
}


def _resolve_class(name: Any) -> type:
    if isinstance(name, type):
        storage_class = name
    elif name in STORAGE_CLASSES:
        storage_class = STORAGE_CLASSES[name]
    elif isinstance(name, str) and "." in name:
        module_name, _, class_name = name.rpartition(".")
        try:
            storage_class = getattr(import_module(module_name), class_name)
        except (ImportError, AttributeError) as exc:
            raise InvalidConfigError(f"Audit storage class {name!r} not found") from exc
    else:
        raise InvalidConfigError(f"Unknown audit storage {name!r}")

    if not issubclass(storage_class, AbstractStorage):
        raise InvalidConfigError(f"{storage_class.__name__} is not an audit storage")
    return storage_class


def create_storage(config: Mapping[str, Any]) -> AbstractStorage:
    """Build a storage backend from ``{"class": ..., **params}``."""
    params = dict(config)
    storage_class = _resolve_class(params.pop("class", "db"))
    try:
        return storage_class(**params)
    except TypeError as exc:
        raise InvalidConfigError(f"Invalid audit storage parameters: {exc}") from exc


__all__ = [
    "AUDIT_FIELDS",
    "AbstractStorage",
    "DbStorage",
    "MemoryStorage",
    "create_storage",
]
