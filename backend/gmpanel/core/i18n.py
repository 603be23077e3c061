"""Minimal message translator used by the panel.

Messages are looked up by category (``backend`` for panel-wide strings, the
module id for module strings) and ``{placeholder}`` parts are filled in from
the given parameters. A missing translation returns the message itself.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

BACKEND = "backend"

# shown when a module does not translate its own name
SYMBOL_NONAME = "[noname]"

_PLACEHOLDER = re.compile(r"\{([A-Za-z0-9_]+)\}")


class Translator:
    def __init__(self, catalogs: Optional[Dict[str, Dict[str, str]]] = None) -> None:
        self.catalogs: Dict[str, Dict[str, str]] = {
            category: dict(messages) for category, messages in (catalogs or {}).items()
        }

    def add_messages(self, category: str, messages: Mapping[str, str]) -> None:
        self.catalogs.setdefault(category, {}).update(messages)

    def has_category(self, category: str) -> bool:
        return category in self.catalogs

    def translate(
        self,
        message: str,
        params: Optional[Mapping[str, Any]] = None,
        category: str = BACKEND,
    ) -> str:
        text = self.catalogs.get(category, {}).get(message, message)
        if not params:
            return text

        def _substitute(match: re.Match) -> str:
            key = match.group(1)
            if key not in params:
                return match.group(0)
            value = params[key]
            return "" if value is None else str(value)

        return _PLACEHOLDER.sub(_substitute, text)

    t = translate
