from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from gmpanel.core import browser
from gmpanel.models.user import User
from gmpanel.models.user_device import UserDevice


def capture_device(
    db: Session, user: User, user_agent: str | None, ipaddress: str | None
) -> UserDevice:
    """Store the device the user is signing in from, replacing the previous one."""
    detected = browser.detect(user_agent)
    device = user.device
    if device is None:
        device = UserDevice(user_id=user.id)
        db.add(device)
        user.device = device
    device.browser_name = detected.browser_name
    device.browser_family = detected.browser_family
    device.os_name = detected.os_name
    device.os_family = detected.os_family
    device.ipaddress = ipaddress
    device.signed_in_at = datetime.now(timezone.utc)
    db.flush()
    return device
