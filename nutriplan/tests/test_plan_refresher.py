import asyncio

import pytest

from nutriplan.events.Event_Bus import PLAN_REFRESHED, EventBus
from nutriplan.infra.plan_refresher import PlanRefresher
from nutriplan.tests.fake_backend import FakeBackend, make_store


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        PlanRefresher(make_store(FakeBackend()), 0)


@pytest.mark.asyncio
async def test_refresh_merges_remote_changes_and_publishes():
    backend = FakeBackend()
    backend.add_plan("P1", "C1", "Balanced Diet")
    bus, seen = EventBus(), []
    bus.subscribe(PLAN_REFRESHED, lambda event, payload: seen.append(payload))
    store = make_store(backend, bus=bus)
    await store.load("C1")
    refresher = PlanRefresher(store, 60)

    assert await refresher.refresh_once() == {"added": [], "removed": [], "changed": []}
    assert seen == []

    backend.plans["P1"]["assignedDates"].append("2024-06-20")
    diff = await refresher.refresh_once()

    assert diff["changed"] == ["P1"]
    assert store.plan_for_date("2024-06-20").id == "P1"
    assert seen[0]["client_id"] == "C1"


@pytest.mark.asyncio
async def test_failed_refresh_keeps_projection():
    backend = FakeBackend()
    backend.add_plan("P1", "C1", "Balanced Diet", dates=["2024-06-01"])
    store = make_store(backend)
    await store.load("C1")
    backend.fail("GET", "/client/C1$", status=503, message="Maintenance")

    assert await PlanRefresher(store, 60).refresh_once() is None
    assert store.plan_for_date("2024-06-01").id == "P1"


@pytest.mark.asyncio
async def test_nothing_loaded_means_nothing_fetched():
    backend = FakeBackend()
    refresher = PlanRefresher(make_store(backend), 60)

    assert await refresher.refresh_once() is None
    assert backend.requests == []


@pytest.mark.asyncio
async def test_start_and_stop():
    backend = FakeBackend()
    backend.add_plan("P1", "C1", "Balanced Diet")
    store = make_store(backend)
    await store.load("C1")
    refresher = PlanRefresher(store, 0.01)

    refresher.start()
    assert refresher.running
    await asyncio.sleep(0.05)
    await refresher.stop()

    assert not refresher.running
    assert len(backend.calls("GET", "/client/C1$")) >= 2


@pytest.mark.asyncio
async def test_refresh_during_assign_keeps_confirmed_dates():
    backend = FakeBackend()
    backend.add_plan("P1", "C1", "Balanced Diet")
    store = make_store(backend)
    await store.load("C1")
    refresher = PlanRefresher(store, 60)

    gate = backend.hold("POST", "/assign$")
    assign = asyncio.create_task(store.assign_dates("P1", "C1", ["2024-06-05"]))
    await backend.wait_parked()
    assert store.pending

    assert await refresher.refresh_once() is None
    gate.set()
    await assign

    assert backend.plans["P1"]["assignedDates"] == ["2024-06-05"]
    assert store.plan_for_date("2024-06-05").id == "P1"
    assert await refresher.refresh_once() == {"added": [], "removed": [], "changed": []}


@pytest.mark.asyncio
async def test_fetch_started_before_assign_is_dropped():
    backend = FakeBackend()
    backend.add_plan("P1", "C1", "Balanced Diet")
    store = make_store(backend)
    await store.load("C1")
    refresher = PlanRefresher(store, 60)

    gate = backend.hold("GET", "/client/C1$")
    refresh = asyncio.create_task(refresher.refresh_once())
    await backend.wait_parked()
    await store.assign_dates("P1", "C1", ["2024-06-05"])
    gate.set()

    assert await refresh is None
    assert store.plan_for_date("2024-06-05").id == "P1"
