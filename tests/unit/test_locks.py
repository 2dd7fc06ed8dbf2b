"""
Unit tests for application/locks.py
"""

import asyncio

import pytest

from application.locks import ScopeLockRegistry

WEEK = "users/u1/programs/p1/weeks/w1"
WORKOUT = WEEK + "/workouts/wo1"
OTHER_WEEK = "users/u1/programs/p1/weeks/w2"


async def _record(locks, path, events, name, hold_for=0.01):
    async with locks.hold(path):
        events.append(f"{name}:start")
        await asyncio.sleep(hold_for)
        events.append(f"{name}:end")


@pytest.mark.unit
class TestScopeLockRegistry:
    @pytest.mark.asyncio
    async def test_hold_and_release(self):
        locks = ScopeLockRegistry()
        async with locks.hold(WEEK):
            assert locks.active == [WEEK]
            assert locks.is_held(WORKOUT)
        assert locks.active == []
        assert not locks.is_held(WEEK)

    @pytest.mark.asyncio
    async def test_same_path_serialises(self):
        locks = ScopeLockRegistry()
        events = []
        await asyncio.gather(
            _record(locks, WEEK, events, "a"),
            _record(locks, WEEK, events, "b"),
        )
        assert events == ["a:start", "a:end", "b:start", "b:end"]

    @pytest.mark.asyncio
    async def test_nested_paths_serialise(self):
        locks = ScopeLockRegistry()
        events = []
        await asyncio.gather(
            _record(locks, WORKOUT, events, "inner"),
            _record(locks, WEEK, events, "outer"),
        )
        assert events == ["inner:start", "inner:end", "outer:start", "outer:end"]

    @pytest.mark.asyncio
    async def test_disjoint_paths_overlap(self):
        locks = ScopeLockRegistry()
        events = []
        await asyncio.gather(
            _record(locks, WEEK, events, "a"),
            _record(locks, OTHER_WEEK, events, "b"),
        )
        assert events[:2] == ["a:start", "b:start"]

    @pytest.mark.asyncio
    async def test_released_on_error(self):
        locks = ScopeLockRegistry()
        with pytest.raises(RuntimeError):
            async with locks.hold(WEEK):
                raise RuntimeError("boom")
        assert locks.active == []

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_break_holder(self):
        locks = ScopeLockRegistry()
        events = []
        holder = asyncio.ensure_future(_record(locks, WEEK, events, "a", hold_for=0.05))
        await asyncio.sleep(0)
        waiter = asyncio.ensure_future(_record(locks, WEEK, events, "b"))
        await asyncio.sleep(0.01)
        waiter.cancel()
        await holder
        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert events == ["a:start", "a:end"]
        assert locks.active == []
