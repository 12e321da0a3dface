"""Session store behaviour for the in-memory and SQLite backends."""
import gc

import aiosqlite
import pytest

from models.session_models import Approval, PaintingBrief, Session
from services.realtime.errors import SessionStoreError
from services.realtime.session_store import SessionStore, SqliteSessionStore
from utils.database_init import AsyncDatabaseInitializer


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return SessionStore()
    return SqliteSessionStore(AsyncDatabaseInitializer(db_dir=tmp_path))


@pytest.mark.asyncio
async def test_get_missing_session_raises_key_error(any_store):
    with pytest.raises(KeyError):
        await any_store.get("nope")


@pytest.mark.asyncio
async def test_create_generates_empty_session(any_store):
    session = await any_store.create()
    assert len(session.id) == 10
    stored = await any_store.get(session.id)
    assert stored.brief == PaintingBrief()
    assert stored.todos == [] and stored.approvals == [] and stored.messages == []
    assert stored.created_at == session.created_at


@pytest.mark.asyncio
async def test_get_or_create_is_read_after_write_consistent(any_store):
    created = await any_store.get_or_create("abc123")
    created.brief.style = "bold"
    created.approvals.append(Approval(ts=1, text="UI_RESPONSE style -> bold"))
    await any_store.save(created)

    again = await any_store.get_or_create("abc123")
    assert again.brief.style == "bold"
    assert [a.text for a in again.approvals] == ["UI_RESPONSE style -> bold"]


@pytest.mark.asyncio
async def test_unsaved_changes_are_not_visible(any_store):
    session = await any_store.create("s1")
    session.brief.constraints["size"] = "xl"
    assert (await any_store.get("s1")).brief.constraints == {}


@pytest.mark.asyncio
async def test_list_sessions_newest_first(any_store):
    await any_store.save(Session(id="old", created_at=1000))
    await any_store.save(Session(id="new", created_at=2000))
    assert [s.id for s in await any_store.list_sessions()] == ["new", "old"]


@pytest.mark.asyncio
async def test_sqlite_store_survives_a_new_instance(tmp_path):
    first = SqliteSessionStore(AsyncDatabaseInitializer(db_dir=tmp_path))
    session = await first.create("durable")
    session.brief.constraints = {"frame": "oak"}
    await first.save(session)

    second = SqliteSessionStore(AsyncDatabaseInitializer(db_dir=tmp_path))
    assert (await second.get("durable")).brief.constraints == {"frame": "oak"}


@pytest.mark.asyncio
async def test_sqlite_reset_wipes_existing_sessions(tmp_path):
    await SqliteSessionStore(AsyncDatabaseInitializer(db_dir=tmp_path)).create("gone")
    fresh = SqliteSessionStore(AsyncDatabaseInitializer(db_dir=tmp_path, reset=True))
    with pytest.raises(KeyError):
        await fresh.get("gone")


def test_database_dir_must_not_be_a_file(tmp_path):
    target = tmp_path / "file.db"
    target.write_text("")
    with pytest.raises(RuntimeError):
        AsyncDatabaseInitializer(db_dir=target)


def test_lock_is_shared_per_session_id():
    store = SessionStore()
    assert store.lock("a") is store.lock("a")
    assert store.lock("a") is not store.lock("b")


@pytest.mark.asyncio
async def test_lock_entry_is_dropped_after_last_use():
    store = SessionStore()
    async with store.lock("a"):
        assert "a" in store._locks
    gc.collect()
    assert "a" not in store._locks


async def _write_payload(db: AsyncDatabaseInitializer, session_id: str, payload: str) -> None:
    async with db.connection() as conn:
        await conn.execute("UPDATE SESSION SET payload = ? WHERE id = ?", (payload, session_id))
        await conn.commit()


async def _read_payload(db: AsyncDatabaseInitializer, session_id: str) -> str:
    async with aiosqlite.connect(db.db_path) as conn:
        cur = await conn.execute("SELECT payload FROM SESSION WHERE id = ?", (session_id,))
        row = await cur.fetchone()
    return row[0]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", ['{"id": "bad"}', "{not json", '{"id": "bad", "createdAt": "soon"}'])
async def test_corrupted_row_is_a_store_error_not_a_missing_session(tmp_path, payload):
    db = AsyncDatabaseInitializer(db_dir=tmp_path)
    store = SqliteSessionStore(db)
    await store.create("bad")
    await _write_payload(db, "bad", payload)

    with pytest.raises(SessionStoreError):
        await store.get_or_create("bad")
    with pytest.raises(SessionStoreError):
        await store.get("bad")
    with pytest.raises(SessionStoreError):
        await store.list_sessions()

    assert await _read_payload(db, "bad") == payload
