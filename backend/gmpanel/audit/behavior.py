from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Union

from gmpanel.audit.info import CommentCallback

if TYPE_CHECKING:
    from gmpanel.audit.service import Audit

logger = logging.getLogger(__name__)

ActionRule = Union[None, str, Iterable[str]]

ANY_ACTION = "*"


def _matches(rule: ActionRule, action_name: str) -> bool:
    if isinstance(rule, str):
        return rule == ANY_ACTION or rule == action_name
    if rule is None:
        return False
    return action_name in rule


class AuditBehavior:
    """Writes the audit log after a controller action has run.

    ``deny`` and ``allowed`` each take ``"*"`` (every action), an action name
    or a collection of action names. Only one of them is evaluated: when
    ``deny`` is set, every action not denied is audited and ``allowed`` is
    ignored; otherwise only the allowed actions are. With neither set nothing
    is audited.

    ``enabled=False`` switches the behaviour off for the controller;
    ``True`` or ``None`` leaves the decision to the audit service.
    """

    def __init__(
        self,
        allowed: ActionRule = None,
        deny: ActionRule = None,
        enabled: Optional[bool] = None,
        comment_callback: Optional[CommentCallback] = None,
        sections: Optional[Iterable[str]] = None,
    ) -> None:
        self.allowed = allowed
        self.deny = deny
        self.enabled = enabled
        self.comment_callback = comment_callback
        self.sections: List[str] = list(sections or [])
        # enabled resolved against the audit service of the last init()
        self.active = False
        self.audit: Optional["Audit"] = None
        self.owner: Any = None

    def resolve_enabled(self, audit: "Audit") -> bool:
        if self.enabled is False:
            return False
        return bool(audit.enabled)

    def init(self, audit: "Audit") -> "AuditBehavior":
        self.audit = audit
        if self.sections:
            audit.sections = list(self.sections)
        self.active = self.resolve_enabled(audit)
        return self

    def attach(self, owner: Any) -> None:
        if self.active:
            self.owner = owner
            owner.on_after_run(self.before_audit)

    def detach(self) -> None:
        if self.owner is not None:
            self.owner.off_after_run(self.before_audit)
            self.owner = None

    def is_deny(self, action_name: str) -> bool:
        return _matches(self.deny, action_name)

    def is_allowed(self, action_name: str) -> bool:
        return _matches(self.allowed, action_name)

    def should_audit(self, action_name: str) -> bool:
        if self.deny:
            return not self.is_deny(action_name)
        if self.allowed:
            return self.is_allowed(action_name)
        return False

    def audit_action(self) -> bool:
        if not self.active or self.audit is None:
            return False
        if self.comment_callback is not None:
            self.audit.info.comment_callback = self.comment_callback
        self.audit.write()
        return True

    def before_audit(self, controller: Any, action_name: str) -> bool:
        if not self.should_audit(action_name):
            logger.debug(
                "audit skipped controller=%s action=%s",
                type(controller).__name__,
                action_name,
            )
            return False
        return self.audit_action()

    def after_run(self, audit: "Audit", action_name: str, controller: Any = None) -> bool:
        """Evaluate the rule for a completed action without attaching."""
        self.init(audit)
        return self.before_audit(controller, action_name)
