from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gmpanel.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit"
    # keeps the sequence in sqlite_sequence so clearing the log can reset it
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    user_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_detail: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_permission: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_ipaddress: Mapped[str | None] = mapped_column(String(45), nullable=True)

    module_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    module_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    controller_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    controller_action: Mapped[str | None] = mapped_column(String(100), nullable=True)
    controller_event: Mapped[str | None] = mapped_column(String(255), nullable=True)

    meta_browser_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    meta_browser_family: Mapped[str | None] = mapped_column(String(100), nullable=True)
    meta_os_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    meta_os_family: Mapped[str | None] = mapped_column(String(100), nullable=True)

    request_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    request_method: Mapped[str | None] = mapped_column(String(10), nullable=True)
    request_code: Mapped[int | None] = mapped_column(Integer, nullable=True)

    query_sql: Mapped[str | None] = mapped_column(Text, nullable=True)
    query_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    query_params: Mapped[str | None] = mapped_column(Text, nullable=True)

    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Use JSON for cross-dialect compatibility (tests run on SQLite in-memory)
    error_params: Mapped[Any] = mapped_column(JSON, nullable=True)
    success: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "YYYY-MM-DD HH:MM:SS" in the panel timezone
    date: Mapped[str | None] = mapped_column(String(19), nullable=True, index=True)

    def get_identifier(self) -> int:
        return self.id
