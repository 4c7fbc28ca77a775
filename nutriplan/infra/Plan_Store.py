"""Client-side projection of one client's meal plans.

Every mutation is two-phase: the request goes to the API first and only a
confirmed success is replayed into local state. A failed call raises and
leaves the projection exactly as it was; nothing is retried.
"""
import logging
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Set

from nutriplan.domain.errors import BusyError, DuplicateNameError, NotFoundError, ValidationError
from nutriplan.domain.MealPlan import MealPlan
from nutriplan.events.Event_Bus import EventBus
from nutriplan.events.event_helpers import (
    publish_dates_assigned,
    publish_dates_removed,
    publish_plan_created,
    publish_plan_deleted,
)
from nutriplan.infra.MealPlan_Api import MealPlanApi
from nutriplan.utilities.date_keys import normalize_key
from nutriplan.utilities.validators import plan_name_of, validate_plan_draft

logger = logging.getLogger(__name__)


def _keys(dates: Iterable) -> Set[str]:
    return {normalize_key(d) for d in dates}


class PlanStore:
    def __init__(self, api: MealPlanApi, bus: Optional[EventBus] = None):
        self.api = api
        self.bus = bus
        self.client_id: Optional[str] = None
        self._plans: List[MealPlan] = []
        # requests in flight, and a counter bumped whenever one starts or plans are loaded
        self._pending = 0
        self._generation = 0

    @property
    def plans(self) -> List[MealPlan]:
        return list(self._plans)

    def clear(self) -> None:
        self.client_id = None
        self._plans = []

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return self._pending > 0

    @contextmanager
    def _outstanding(self):
        self._pending += 1
        self._generation += 1
        try:
            yield
        finally:
            self._pending -= 1

    async def load(self, client_id: str) -> List[MealPlan]:
        """Fetch the client's plans and make them the current projection."""
        if self.pending:
            raise BusyError("load plans")
        plans = await self.api.list_client_plans(client_id)
        self._generation += 1
        self.client_id = client_id
        self._plans = plans
        logger.info("Loaded %d plan(s) for client %s", len(plans), client_id)
        return self.plans

    # -------------------- Lookups --------------------
    def find(self, plan_id: str) -> Optional[MealPlan]:
        for plan in self._plans:
            if plan.id == plan_id:
                return plan
        return None

    def get(self, plan_id: str) -> MealPlan:
        plan = self.find(plan_id)
        if plan is None:
            raise NotFoundError("MealPlan", plan_id)
        return plan

    def plan_for_date(self, key: str) -> Optional[MealPlan]:
        """The plan holding ``key``, or None when the day is free."""
        for plan in self._plans:
            if plan.holds(key):
                return plan
        return None

    def assignments(self) -> Dict[str, MealPlan]:
        """Map of every assigned key to the plan holding it."""
        index: Dict[str, MealPlan] = {}
        for plan in self._plans:
            for key in plan.assigned_dates:
                index.setdefault(key, plan)
        return index

    def has_plan_named(self, name: str) -> bool:
        return any(p.has_name(name) for p in self._plans)

    def _check_client(self, client_id: str) -> None:
        if self.client_id is None or client_id != self.client_id:
            raise ValidationError(f"Plans for client '{client_id}' are not loaded", field="clientId")

    # -------------------- Mutations --------------------
    async def create_plan(self, client_id: str, draft) -> MealPlan:
        """Create a plan for the client; duplicate names are refused before any request."""
        self._check_client(client_id)
        name = plan_name_of(draft)
        if name and self.has_plan_named(name):
            raise DuplicateNameError(name, client_id)
        valid = validate_plan_draft(draft)

        with self._outstanding():
            plan = await self.api.create_plan(valid.to_payload(self.api.session.user_id, client_id))
        plan.assigned_dates = set()
        self._plans.append(plan)
        logger.info("Created plan %s (%s) for client %s", plan.id, plan.plan_name, client_id)
        publish_plan_created(client_id, plan, bus=self.bus)
        return plan

    async def assign_dates(self, plan_id: str, client_id: str, dates: Iterable) -> None:
        self._check_client(client_id)
        keys = _keys(dates)
        if not keys:
            raise ValidationError("No dates selected", field="dates")
        plan = self.get(plan_id)

        with self._outstanding():
            await self.api.assign_dates(plan_id, client_id, keys)
        # replay onto the plan as it is held now, not as it was before the await
        plan = self.find(plan_id) or plan
        plan.assigned_dates |= keys
        logger.info("Assigned plan %s to %d date(s) for client %s", plan_id, len(keys), client_id)
        publish_dates_assigned(client_id, plan, keys, bus=self.bus)

    async def remove_dates(self, plan_id: str, client_id: str, dates: Iterable) -> None:
        self._check_client(client_id)
        keys = _keys(dates)
        if not keys:
            raise ValidationError("No dates selected", field="dates")
        plan = self.get(plan_id)

        with self._outstanding():
            await self.api.remove_dates(plan_id, client_id, keys)
        plan = self.find(plan_id) or plan
        plan.assigned_dates -= keys
        logger.info("Removed plan %s from %d date(s) for client %s", plan_id, len(keys), client_id)
        publish_dates_removed(client_id, plan, keys, bus=self.bus)

    async def delete_plan(self, plan_id: str) -> None:
        plan = self.get(plan_id)

        with self._outstanding():
            await self.api.delete_plan(plan_id)
        self._plans = [p for p in self._plans if p.id != plan_id]
        logger.info("Deleted plan %s", plan_id)
        publish_plan_deleted(self.client_id, plan, bus=self.bus)

    # -------------------- Refresh --------------------
    def merge_remote(self, client_id: str, remote: List[MealPlan],
                     generation: Optional[int] = None) -> Optional[Dict[str, List[str]]]:
        """Replace the projection with a fresh fetch and report what differed.

        Returns ``{'added': [...], 'removed': [...], 'changed': [...]}`` (plan ids).
        A fetch for a client that is no longer loaded is ignored.

        Returns None without touching the projection while a mutation is in
        flight, or when ``generation`` (read before the fetch started) shows a
        mutation or load began since; that fetch may predate a confirmed change.
        """
        diff: Dict[str, List[str]] = {'added': [], 'removed': [], 'changed': []}
        if client_id != self.client_id:
            return diff
        if self.pending or (generation is not None and generation != self._generation):
            logger.debug("Deferring plan refresh for client %s: local changes in flight", client_id)
            return None
        local = {p.id: p for p in self._plans}
        fresh = {p.id: p for p in remote}
        diff['added'] = sorted(pid for pid in fresh if pid not in local)
        diff['removed'] = sorted(pid for pid in local if pid not in fresh)
        diff['changed'] = sorted(
            pid for pid in fresh
            if pid in local and fresh[pid].to_dict() != local[pid].to_dict()
        )
        self._plans = list(remote)
        return diff
