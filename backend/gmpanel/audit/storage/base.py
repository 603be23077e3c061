from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class AbstractStorage:
    """Where finished audit records go.

    Only the attributes named in ``masked_attributes()`` reach a backend, under
    the field name given there. A backend without a mask receives the
    attributes untouched, so concrete backends are expected to declare one.
    """

    def __init__(self, limit: int = 1000) -> None:
        # maximum number of records kept; 0 disables pruning
        self.limit = limit
        # sequence number of the last written record
        self.index = 0

    def masked_attributes(self) -> Dict[str, str]:
        return {}

    def unmasked_attributes(self, attributes: Mapping[str, Any]) -> Dict[str, Any]:
        mask = self.masked_attributes()
        if not mask:
            return dict(attributes)
        return {mask[key]: value for key, value in attributes.items() if key in mask}

    def has_limit_rows(self) -> bool:
        if not self.limit or not self.index:
            return False
        return self.index > self.limit

    def clear(self) -> None:
        self.index = 0

    def write(self, attributes: Optional[Mapping[str, Any]] = None) -> None:
        """Persist one record. The base backend keeps nothing."""
