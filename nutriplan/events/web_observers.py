"""Web-facing observers for meal-plan events.

Subscribes to an event bus for every plan.* event and keeps a small
in-memory ring buffer of user-facing notices ("Plan X assigned to 3 days")
that the JSON surface serves to the page.

Design:
  * Each notice has an auto-increment integer id (cursor) so clients can
    request only newer notices (since=<last_id_seen>).
  * A Lock guards the buffer so it can be read from any thread.
  * MAX_NOTICES caps memory use.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, ALL_PLAN_EVENTS,
    PLAN_CREATED, PLAN_DATES_ASSIGNED, PLAN_DATES_REMOVED, PLAN_DELETED, PLAN_REFRESHED
)

MAX_NOTICES = 300


def _plan_name(payload: Dict[str, Any]) -> str:
    plan = payload.get('plan')
    return getattr(plan, 'plan_name', '') or ''


def _days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


def describe(event_name: str, payload: Any) -> Optional[str]:
    """Return the notice text for an event, or None if it is not worth showing."""
    if not isinstance(payload, dict):
        return None
    name = _plan_name(payload)
    if event_name == PLAN_CREATED:
        return f'Plan "{name}" created successfully!'
    if event_name == PLAN_DATES_ASSIGNED:
        dates = payload.get('dates') or []
        if len(dates) == 1:
            return f'Plan "{name}" assigned for {dates[0]}!'
        return f'Plan "{name}" assigned to {_days(len(dates))}!'
    if event_name == PLAN_DATES_REMOVED:
        dates = payload.get('dates') or []
        if len(dates) == 1:
            return f'Plan "{name}" removed on {dates[0]}.'
        return f'Plan "{name}" removed from {_days(len(dates))}.'
    if event_name == PLAN_DELETED:
        return f'Plan "{name}" deleted successfully!'
    if event_name == PLAN_REFRESHED:
        changed = sum(len(payload.get(k) or []) for k in ('added', 'removed', 'changed'))
        if changed:
            return f"Meal plans updated ({changed} changed)."
    return None


class NoticeFeed:
    def __init__(self, max_notices: int = MAX_NOTICES):
        self._lock = Lock()
        self._notices: List[Dict[str, Any]] = []
        self._next_id = 1
        self._max = max_notices
        self._bus: Optional[EventBus] = None

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        text = describe(event_name, payload)
        if text is None:
            return
        with self._lock:
            self._notices.append({
                'id': self._next_id,
                'type': event_name,
                'message': text,
                'client_id': payload.get('client_id'),
                'ts': datetime.now(timezone.utc).isoformat(),
            })
            self._next_id += 1
            if len(self._notices) > self._max:
                del self._notices[: len(self._notices) - self._max]

    def start(self, bus: Optional[EventBus] = None):
        """Idempotent start: subscribe to every plan event once."""
        if self._bus is not None:
            return
        self._bus = bus if bus is not None else GLOBAL_EVENT_BUS
        for name in ALL_PLAN_EVENTS:
            self._bus.subscribe(name, self._record)

    def stop(self):
        if self._bus is None:
            return
        for name in ALL_PLAN_EVENTS:
            self._bus.unsubscribe(name, self._record)
        self._bus = None

    def get_notices(self, since: int | None = None) -> Dict[str, Any]:
        """Return notices newer than 'since' (exclusive).

        Response includes next_cursor (largest id) so a page can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._notices)
            else:
                data = [n for n in self._notices if n['id'] > since]
            next_cursor = self._notices[-1]['id'] if self._notices else since or 0
        return {'notices': data, 'next_cursor': next_cursor}


__all__ = ['NoticeFeed', 'describe', 'MAX_NOTICES']
