from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gmpanel.db.base import Base


class UserDevice(Base):
    """Device the user signed in from, captured at login."""

    __tablename__ = "user_devices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, unique=True, index=True
    )
    browser_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    browser_family: Mapped[str | None] = mapped_column(String(100), nullable=True)
    os_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    os_family: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ipaddress: Mapped[str | None] = mapped_column(String(45), nullable=True)
    signed_in_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user = relationship("User", back_populates="device")
