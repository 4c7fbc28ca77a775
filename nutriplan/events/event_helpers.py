"""Event helper utilities.

Helpers for publishing meal-plan events on a bus; the store calls these after
each mutation the API has confirmed.

Quick import:
    from nutriplan.events.event_helpers import (
        publish_plan_created, publish_dates_assigned, publish_dates_removed,
        publish_plan_deleted, publish_plans_refreshed
    )
"""
from __future__ import annotations
from typing import Any, Iterable, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    PLAN_CREATED, PLAN_DATES_ASSIGNED, PLAN_DATES_REMOVED, PLAN_DELETED, PLAN_REFRESHED
)

__all__ = [
    'publish_plan_created', 'publish_dates_assigned', 'publish_dates_removed',
    'publish_plan_deleted', 'publish_plans_refreshed',
]


def _bus(bus: Optional[EventBus]) -> EventBus:
    return bus if bus is not None else GLOBAL_EVENT_BUS


def publish_plan_created(client_id: str, plan: Any, bus: Optional[EventBus] = None):
    """Publish a plan.created event."""
    _bus(bus).publish(PLAN_CREATED, {'client_id': client_id, 'plan': plan})


def publish_dates_assigned(client_id: str, plan: Any, dates: Iterable[str], bus: Optional[EventBus] = None):
    """Publish a plan.dates_assigned event."""
    _bus(bus).publish(PLAN_DATES_ASSIGNED, {
        'client_id': client_id,
        'plan': plan,
        'dates': sorted(dates),
    })


def publish_dates_removed(client_id: str, plan: Any, dates: Iterable[str], bus: Optional[EventBus] = None):
    """Publish a plan.dates_removed event."""
    _bus(bus).publish(PLAN_DATES_REMOVED, {
        'client_id': client_id,
        'plan': plan,
        'dates': sorted(dates),
    })


def publish_plan_deleted(client_id: str, plan: Any, bus: Optional[EventBus] = None):
    _bus(bus).publish(PLAN_DELETED, {'client_id': client_id, 'plan': plan})


def publish_plans_refreshed(client_id: str, diff: dict, bus: Optional[EventBus] = None):
    """Publish a snapshot of what a background refresh changed.

    Payload structure:
        {
          'client_id': <str>,
          'added': [plan ids], 'removed': [plan ids], 'changed': [plan ids]
        }
    """
    payload = {'client_id': client_id}
    payload.update(diff)
    _bus(bus).publish(PLAN_REFRESHED, payload)
