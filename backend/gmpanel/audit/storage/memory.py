from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from gmpanel.audit.storage.base import AbstractStorage
from gmpanel.audit.storage.db import AUDIT_FIELDS

logger = logging.getLogger(__name__)


class MemoryStorage(AbstractStorage):
    """Keeps audit records in process memory (single process, tests, demos)."""

    def __init__(self, limit: int = 1000, mask: Optional[Mapping[str, str]] = None) -> None:
        super().__init__(limit=limit)
        self.mask = dict(AUDIT_FIELDS if mask is None else mask)
        self.records: List[Dict[str, Any]] = []
        self._sequence = 0

    def masked_attributes(self) -> Dict[str, str]:
        return dict(self.mask)

    def clear(self) -> None:
        logger.info("audit log cleared records=%s", len(self.records))
        self.records.clear()
        self._sequence = 0
        super().clear()

    def write(self, attributes: Optional[Mapping[str, Any]] = None) -> None:
        record = self.unmasked_attributes(attributes or {})
        if not record:
            return
        self._sequence += 1
        self.records.append({"id": self._sequence, **record})
        self.index = self._sequence
        if self.has_limit_rows():
            self.clear()
