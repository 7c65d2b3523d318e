"""Tests for per-identity session storage and locking."""

import asyncio

import pytest

from leadbot.conversation.session_store import InMemorySessionStore, SessionStore


class TestSessionLifecycle:
    def test_get_or_create_uses_initial_stage(self, session_store):
        session = session_store.get_or_create("51999000111")
        assert session.stage == "MAIN_MENU"
        assert session.fields == {}

    def test_get_or_create_returns_same_session(self, session_store):
        first = session_store.get_or_create("51999000111")
        first.fields["name"] = "Ana"
        assert session_store.get_or_create("51999000111") is first

    def test_get_does_not_create(self, session_store):
        assert session_store.get("51999000111") is None
        assert "51999000111" not in session_store

    def test_reset_removes(self, session_store):
        session_store.get_or_create("51999000111")
        session_store.reset("51999000111")
        assert session_store.get("51999000111") is None
        assert len(session_store) == 0

    def test_reset_is_idempotent(self, session_store):
        session_store.reset("nobody")
        session_store.reset("nobody")
        assert len(session_store) == 0

    def test_identities_are_independent(self, session_store):
        a = session_store.get_or_create("a")
        b = session_store.get_or_create("b")
        a.stage = "ASK_NAME"
        assert b.stage == "MAIN_MENU"
        session_store.reset("a")
        assert session_store.get("b") is b

    def test_is_a_session_store(self, session_store):
        assert isinstance(session_store, SessionStore)


class TestLocking:
    @pytest.mark.asyncio
    async def test_same_identity_is_serialized_in_arrival_order(self):
        store = InMemorySessionStore("MENU")
        order: list[str] = []
        release = asyncio.Event()

        async def first():
            async with store.lock("u1"):
                order.append("first:start")
                await release.wait()
                order.append("first:end")

        async def later(tag: str):
            async with store.lock("u1"):
                order.append(tag)

        t1 = asyncio.create_task(first())
        await asyncio.sleep(0)
        t2 = asyncio.create_task(later("second"))
        t3 = asyncio.create_task(later("third"))
        await asyncio.sleep(0)
        assert order == ["first:start"]

        release.set()
        await asyncio.gather(t1, t2, t3)
        assert order == ["first:start", "first:end", "second", "third"]

    @pytest.mark.asyncio
    async def test_distinct_identities_do_not_block(self):
        store = InMemorySessionStore("MENU")
        release = asyncio.Event()
        entered: list[str] = []

        async def hold(identity: str):
            async with store.lock(identity):
                entered.append(identity)
                await release.wait()

        t1 = asyncio.create_task(hold("u1"))
        t2 = asyncio.create_task(hold("u2"))
        await asyncio.sleep(0)
        assert sorted(entered) == ["u1", "u2"]
        release.set()
        await asyncio.gather(t1, t2)

    @pytest.mark.asyncio
    async def test_lock_entries_are_released(self):
        store = InMemorySessionStore("MENU")
        async with store.lock("u1"):
            pass
        assert store._locks == {}

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self):
        store = InMemorySessionStore("MENU")
        with pytest.raises(RuntimeError):
            async with store.lock("u1"):
                raise RuntimeError("boom")
        async with store.lock("u1"):
            pass
        assert store._locks == {}

    @pytest.mark.asyncio
    async def test_read_modify_write_does_not_interleave(self):
        store = InMemorySessionStore("MENU")

        async def bump():
            async with store.lock("u1"):
                session = store.get_or_create("u1")
                current = session.turns
                await asyncio.sleep(0)
                session.turns = current + 1

        await asyncio.gather(*(bump() for _ in range(20)))
        assert store.get("u1").turns == 20
