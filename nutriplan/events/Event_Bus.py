"""Simple Event Bus / Observer implementation for meal-plan changes.

Event names used so far:
  plan.created -> payload {"client_id": str, "plan": MealPlan}
  plan.dates_assigned -> payload {"client_id": str, "plan": MealPlan, "dates": [str]}
  plan.dates_removed -> payload {"client_id": str, "plan": MealPlan, "dates": [str]}
  plan.deleted -> payload {"client_id": str, "plan": MealPlan}
  plan.refreshed -> payload {"client_id": str, "added": [str], "removed": [str], "changed": [str]}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLAN_CREATED = "plan.created"
PLAN_DATES_ASSIGNED = "plan.dates_assigned"
PLAN_DATES_REMOVED = "plan.dates_removed"
PLAN_DELETED = "plan.deleted"
PLAN_REFRESHED = "plan.refreshed"

ALL_PLAN_EVENTS = (PLAN_CREATED, PLAN_DATES_ASSIGNED, PLAN_DATES_REMOVED, PLAN_DELETED, PLAN_REFRESHED)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		# subscriber errors are logged, never raised
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# Shared instance for callers that do not pass their own bus
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'ALL_PLAN_EVENTS',
	'PLAN_CREATED', 'PLAN_DATES_ASSIGNED', 'PLAN_DATES_REMOVED', 'PLAN_DELETED', 'PLAN_REFRESHED'
]
