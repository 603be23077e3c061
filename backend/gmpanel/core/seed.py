from __future__ import annotations

import logging

from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from gmpanel.core.config import settings
from gmpanel.core.security import hash_password, verify_password
from gmpanel.models.role import Role
from gmpanel.models.user import User
from gmpanel.models.user_profile import UserProfile

logger = logging.getLogger(__name__)

ROLE_NAMES = ["ADMIN", "VIEW"]


def ensure_seed_data(db: Session) -> None:
    """
    Idempotent seed for DEV when SEED_ENABLED=true: roles plus the master
    panel account with its profile.
    """
    if not settings.SEED_ENABLED:
        return

    # If tables are not ready yet (migrations not applied), exit silently.
    try:
        db.query(Role).limit(1).all()
    except (OperationalError, ProgrammingError):
        logger.warning("seed skipped, schema is not ready")
        return

    roles: dict[str, Role] = {}
    for name in ROLE_NAMES:
        role = db.query(Role).filter(Role.name == name).first()
        if not role:
            role = Role(name=name)
            db.add(role)
            db.flush()
        roles[name] = role

    user = db.query(User).filter(User.username == settings.MASTER_USERNAME).first()
    if not user:
        user = User(
            username=settings.MASTER_USERNAME,
            hashed_password=hash_password(settings.MASTER_PASSWORD),
            is_active=True,
        )
        db.add(user)
        db.flush()
    elif not verify_password(settings.MASTER_PASSWORD, user.hashed_password):
        user.hashed_password = hash_password(settings.MASTER_PASSWORD)

    if user.profile is None:
        db.add(UserProfile(user_id=user.id, call_name=settings.MASTER_CALL_NAME))

    master_roles = [
        role.strip().upper() for role in settings.MASTER_ROLES.split(",") if role.strip()
    ]
    existing = {role.name for role in user.roles}
    for name in master_roles:
        if name in roles and name not in existing:
            user.roles.append(roles[name])

    db.commit()
    logger.info("seed data ensured user=%s", user.username)
