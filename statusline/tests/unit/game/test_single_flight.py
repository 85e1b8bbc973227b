"""
Unit tests for SingleFlight.

Overlapping runs for one key must coalesce into at most one trailing rerun,
while different keys run independently.
"""

import asyncio

import pytest

from statusline.game.status.single_flight import SingleFlight


@pytest.mark.asyncio
async def test_single_call_runs_once():
    """A lone call runs the function once and returns its result."""
    flights: SingleFlight[int] = SingleFlight()
    calls = 0

    async def work() -> int:
        nonlocal calls
        calls += 1
        return 42

    assert await flights.run("key", work) == 42
    assert calls == 1
    assert flights.in_flight == 0


@pytest.mark.asyncio
async def test_overlapping_calls_coalesce_into_one_rerun():
    """Three overlapping triggers cost the first run plus exactly one rerun."""
    flights: SingleFlight[int] = SingleFlight()
    gate = asyncio.Event()
    calls = 0

    async def work() -> int:
        nonlocal calls
        calls += 1
        if calls == 1:
            await gate.wait()
        return calls

    first = asyncio.create_task(flights.run("key", work))
    await asyncio.sleep(0)
    assert flights.is_in_flight("key")

    joiners = [asyncio.create_task(flights.run("key", work)) for _ in range(2)]
    await asyncio.sleep(0)
    gate.set()

    results = await asyncio.gather(first, *joiners)
    assert calls == 2
    assert results == [2, 2, 2]
    assert not flights.is_in_flight("key")


@pytest.mark.asyncio
async def test_last_run_sees_latest_data():
    """A change made while a run is in flight is picked up by the rerun."""
    flights: SingleFlight[str] = SingleFlight()
    source = {"value": "old"}
    gate = asyncio.Event()
    seen: list[str] = []

    async def work() -> str:
        snapshot = source["value"]
        if not seen:
            await gate.wait()
        seen.append(snapshot)
        return snapshot

    first = asyncio.create_task(flights.run("key", work))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    source["value"] = "new"
    second = asyncio.create_task(flights.run("key", work))
    await asyncio.sleep(0)
    gate.set()

    assert await first == "new"
    assert await second == "new"
    assert seen == ["old", "new"]


@pytest.mark.asyncio
async def test_different_keys_run_independently():
    """Keys never coalesce with each other."""
    flights: SingleFlight[str] = SingleFlight()
    gate = asyncio.Event()

    async def slow() -> str:
        await gate.wait()
        return "slow"

    async def fast() -> str:
        return "fast"

    blocked = asyncio.create_task(flights.run("a", slow))
    await asyncio.sleep(0)
    assert await flights.run("b", fast) == "fast"
    assert flights.in_flight == 1

    gate.set()
    assert await blocked == "slow"


@pytest.mark.asyncio
async def test_failure_propagates_and_clears_flight():
    """An exception reaches every waiter and the key can run again."""
    flights: SingleFlight[None] = SingleFlight()

    async def broken() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await flights.run("key", broken)
    assert not flights.is_in_flight("key")

    async def fine() -> None:
        return None

    assert await flights.run("key", fine) is None


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_run():
    """Cancelling one caller leaves the shared run going for the others."""
    flights: SingleFlight[str] = SingleFlight()
    gate = asyncio.Event()

    async def work() -> str:
        await gate.wait()
        return "done"

    first = asyncio.create_task(flights.run("key", work))
    await asyncio.sleep(0)
    second = asyncio.create_task(flights.run("key", work))
    await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first

    gate.set()
    assert await second == "done"
