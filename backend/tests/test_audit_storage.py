import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gmpanel.audit import (
    AbstractStorage,
    DbStorage,
    InvalidConfigError,
    MemoryStorage,
    create_storage,
)
from gmpanel.db.base import Base
from gmpanel.models.audit_log import AuditLog


class MaskedStorage(AbstractStorage):
    def __init__(self, limit: int = 1000) -> None:
        super().__init__(limit=limit)
        self.written = []

    def masked_attributes(self):
        return {"userId": "user_id"}

    def write(self, attributes=None):
        self.written.append(self.unmasked_attributes(attributes or {}))


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _count(session_factory, table=AuditLog.__table__) -> int:
    db = session_factory()
    try:
        return db.execute(select(func.count()).select_from(table)).scalar_one()
    finally:
        db.close()


def test_unmasked_attributes_keep_only_whitelisted_fields():
    storage = MaskedStorage()

    assert storage.unmasked_attributes({"userId": 7, "secret": "x"}) == {"user_id": 7}


def test_storage_without_mask_passes_attributes_through():
    storage = MemoryStorage(mask={})

    assert storage.unmasked_attributes({"a": 1}) == {"a": 1}


def test_has_limit_rows():
    storage = MemoryStorage(limit=5)
    assert storage.has_limit_rows() is False

    storage.index = 5
    assert storage.has_limit_rows() is False

    storage.index = 6
    assert storage.has_limit_rows() is True

    storage.limit = 0
    assert storage.has_limit_rows() is False


def test_memory_storage_writes_masked_records():
    storage = MemoryStorage()
    storage.write({"userId": 1, "userName": "alice", "password": "secret"})

    assert storage.records == [{"id": 1, "user_id": 1, "user_name": "alice"}]
    assert storage.index == 1


def test_memory_storage_skips_empty_records():
    storage = MemoryStorage()
    storage.write({"password": "secret"})

    assert storage.records == []
    assert storage.index == 0


def test_memory_storage_clears_everything_past_limit():
    storage = MemoryStorage(limit=5)
    for number in range(5):
        storage.write({"userId": number})
    assert len(storage.records) == 5
    assert storage.index == 5

    storage.write({"userId": 5})
    assert storage.records == []
    assert storage.index == 0

    storage.write({"userId": 6})
    assert storage.records == [{"id": 1, "user_id": 6}]
    assert storage.index == 1


def test_db_storage_inserts_rows(session_factory):
    storage = DbStorage(session_factory=session_factory)
    storage.write({"userId": 42, "userName": "alice", "requestCode": 200, "secret": "x"})

    db = session_factory()
    try:
        row = db.execute(select(AuditLog)).scalar_one()
    finally:
        db.close()
    assert row.user_id == 42
    assert row.user_name == "alice"
    assert row.request_code == 200
    assert storage.index == row.id == 1


def test_db_storage_cuts_values_to_column_width(session_factory):
    storage = DbStorage(session_factory=session_factory)
    path = "/api/v1/files/" + "a" * 300
    storage.write({"requestUrl": path, "queryId": "9" * 150, "comment": "c" * 1000})

    db = session_factory()
    try:
        row = db.execute(select(AuditLog)).scalar_one()
    finally:
        db.close()
    assert row.request_url == path[:255]
    assert row.query_id == "9" * 100
    assert row.comment == "c" * 1000


def test_db_storage_ignores_records_without_known_fields(session_factory):
    storage = DbStorage(session_factory=session_factory)
    storage.write({"secret": "x"})

    assert _count(session_factory) == 0
    assert storage.index == 0


def test_db_storage_clears_and_resets_sequence_past_limit(session_factory):
    storage = DbStorage(limit=2, session_factory=session_factory)
    storage.write({"userId": 1})
    storage.write({"userId": 2})
    assert _count(session_factory) == 2

    storage.write({"userId": 3})
    assert _count(session_factory) == 0
    assert storage.index == 0

    storage.write({"userId": 4})
    assert storage.index == 1


def test_db_storage_with_custom_table(session_factory):
    storage = DbStorage(table_name="panel_audit", session_factory=session_factory)
    db = session_factory()
    try:
        storage.table.create(bind=db.get_bind())
    finally:
        db.close()

    storage.write({"userId": 3})

    assert storage.table.name == "panel_audit"
    assert _count(session_factory, storage.table) == 1
    assert _count(session_factory) == 0


def test_db_storage_errors_propagate(session_factory):
    storage = DbStorage(table_name="missing_audit", session_factory=session_factory)

    with pytest.raises(Exception):
        storage.write({"userId": 1})


def test_create_storage_from_alias_and_path():
    storage = create_storage({"class": "memory", "limit": 10})
    assert isinstance(storage, MemoryStorage)
    assert storage.limit == 10

    storage = create_storage({"class": "gmpanel.audit.storage.db.DbStorage", "table_name": "audit"})
    assert isinstance(storage, DbStorage)
    assert storage.limit == 1000


@pytest.mark.parametrize(
    "config",
    [
        {"class": "file"},
        {"class": "gmpanel.audit.storage.db.Missing"},
        {"class": "gmpanel.audit.info.Info"},
        {"class": "memory", "table_name": "audit"},
    ],
)
def test_create_storage_rejects_invalid_config(config):
    with pytest.raises(InvalidConfigError):
        create_storage(config)
