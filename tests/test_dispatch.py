"""Tests for the background task dispatcher."""

import asyncio
import logging

import pytest

from leadbot.dispatch import BackgroundDispatcher


class TestBackgroundDispatcher:
    @pytest.mark.asyncio
    async def test_drain_waits_for_tasks(self):
        dispatcher = BackgroundDispatcher()
        done = []

        async def work():
            await asyncio.sleep(0)
            done.append(True)

        dispatcher.spawn(work(), name="work")
        assert dispatcher.pending == 1
        await dispatcher.drain()
        assert done == [True]
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_failures_are_logged(self, caplog):
        dispatcher = BackgroundDispatcher()

        async def broken():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="leadbot.dispatch"):
            dispatcher.spawn(broken(), name="broken-task")
            await dispatcher.drain()
        assert "broken-task failed" in caplog.text

    @pytest.mark.asyncio
    async def test_drain_picks_up_tasks_spawned_while_draining(self):
        dispatcher = BackgroundDispatcher()
        done = []

        async def child():
            done.append("child")

        async def parent():
            dispatcher.spawn(child(), name="child")
            done.append("parent")

        dispatcher.spawn(parent(), name="parent")
        await dispatcher.drain()
        assert done == ["parent", "child"]
