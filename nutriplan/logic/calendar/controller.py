"""Calendar controller for the dietitian's meal-plan workflow.

Holds the UI state of the assignment screen (selected client and plan,
displayed month, mode, multiple-mode selection, delete mode) and turns user
actions into store mutations:

  * assignment resolves the mode's target keys and issues a single
    assign request for the whole set;
  * removal groups the target keys by the plan that currently holds them and
    issues one remove request per plan; free days are skipped.

Only one mutation may be outstanding at a time; a second one raises
BusyError, the way a disabled submit button would.
"""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Set

from nutriplan.domain.Client import Client
from nutriplan.domain.errors import BusyError, NotFoundError, ValidationError
from nutriplan.domain.MealPlan import MealPlan
from nutriplan.domain.Session import Session
from nutriplan.infra.Plan_Store import PlanStore
from nutriplan.logic.calendar.grid import render_month
from nutriplan.logic.calendar.modes import (
    AssignmentMode,
    resolve_custom,
    resolve_month,
    resolve_multiple,
    resolve_single,
)
from nutriplan.utilities.date_keys import is_past, normalize_key, shift_month

logger = logging.getLogger(__name__)


class CalendarController:
    def __init__(self, session: Session, store: PlanStore,
                 today: Optional[Callable[[], date]] = None):
        self.session = session
        self.store = store
        self._today = today or date.today
        now = self._today()
        self.year, self.month = now.year, now.month
        self.clients: List[Client] = []
        self.client: Optional[Client] = None
        self.selected_plan_id: Optional[str] = None
        self.mode = AssignmentMode.SINGLE
        self.selection: Set[str] = set()
        self.delete_mode = False
        self.filter_start: Optional[str] = None
        self.filter_end: Optional[str] = None
        self._busy = False

    # -------------------- Guards --------------------
    @property
    def busy(self) -> bool:
        return self._busy

    @contextmanager
    def _in_progress(self, operation: str):
        if self._busy:
            raise BusyError(operation)
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _require_client(self) -> Client:
        if self.client is None:
            raise ValidationError("Select a client first", field="client")
        return self.client

    def _require_plan(self) -> MealPlan:
        if self.selected_plan_id is None:
            raise ValidationError("Select a plan to assign first", field="plan")
        return self.store.get(self.selected_plan_id)

    # -------------------- Clients & plans --------------------
    async def load_clients(self) -> List[Client]:
        self.clients = await self.store.api.list_clients()
        return list(self.clients)

    async def select_client(self, client_id: str) -> List[MealPlan]:
        client = next((c for c in self.clients if c.id == client_id), None)
        if client is None:
            raise NotFoundError("Client", client_id)
        with self._in_progress("switch client"):
            plans = await self.store.load(client_id)
        self.client = client
        self.selected_plan_id = None
        self.delete_mode = False
        self.selection.clear()
        return plans

    def choose_plan(self, plan_id: Optional[str]) -> None:
        """Pick the plan that later assignments will use (None to clear)."""
        if plan_id is not None:
            self.store.get(plan_id)
        self.selected_plan_id = plan_id
        self.selection.clear()

    async def create_plan(self, draft) -> MealPlan:
        client = self._require_client()
        with self._in_progress("create a plan"):
            return await self.store.create_plan(client.id, draft)

    async def delete_plan(self, plan_id: str) -> None:
        self._require_client()
        with self._in_progress("delete a plan"):
            await self.store.delete_plan(plan_id)
        if self.selected_plan_id == plan_id:
            self.selected_plan_id = None

    # -------------------- Modes & navigation --------------------
    def set_mode(self, mode) -> None:
        self.mode = AssignmentMode.parse(mode)
        self.selection.clear()

    def set_delete_mode(self, enabled: bool) -> None:
        self.delete_mode = bool(enabled)
        self.selection.clear()

    def change_month(self, delta: int) -> None:
        self.year, self.month = shift_month(self.year, self.month, delta)

    def show_month(self, year: int, month: int) -> None:
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month {month}", field="month")
        self.year, self.month = year, month

    def go_to_today(self) -> None:
        now = self._today()
        self.year, self.month = now.year, now.month

    def set_filter(self, start: Optional[str] = None, end: Optional[str] = None) -> None:
        """Restrict the rendered days to start..end (either bound optional)."""
        start = normalize_key(start) if start else None
        end = normalize_key(end) if end else None
        if start and end and start > end:
            raise ValidationError(f"Start date {start} is after end date {end}", field="start")
        self.filter_start, self.filter_end = start, end

    def toggle_day(self, day) -> bool:
        """Add or drop a day from the multiple-mode selection; returns True if now selected."""
        if self.mode is not AssignmentMode.MULTIPLE:
            raise ValidationError("Days can only be toggled in multiple mode", field="mode")
        key = normalize_key(day)
        if key in self.selection:
            self.selection.discard(key)
            return False
        self.selection.add(key)
        return True

    # -------------------- Calendar actions --------------------
    def view_plan(self, day) -> dict:
        key = normalize_key(day)
        plan = self.store.plan_for_date(key)
        if plan is None:
            raise NotFoundError("Assignment", key)
        view = plan.detail()
        view["date"] = key
        return view

    async def click_day(self, day) -> dict:
        """Handle a click on a calendar cell according to mode and delete mode."""
        key = normalize_key(day)
        owner = self.store.plan_for_date(key)

        if self.delete_mode:
            if self.mode is AssignmentMode.MULTIPLE:
                return {"action": "toggled", "date": key, "selected": self.toggle_day(key)}
            if self.mode is AssignmentMode.SINGLE and owner is not None:
                return await self.remove_day(key)
            return {"action": "none", "date": key}

        if owner is not None:
            return {"action": "view", "date": key, "plan": self.view_plan(key)}
        if self.mode is AssignmentMode.MULTIPLE:
            return {"action": "toggled", "date": key, "selected": self.toggle_day(key)}
        if self.mode is AssignmentMode.SINGLE:
            return await self.assign_day(key)
        return {"action": "none", "date": key}

    async def assign_day(self, day) -> dict:
        key = next(iter(resolve_single(day)))
        if self.store.plan_for_date(key) is not None:
            raise ValidationError(f"{key} already has a plan; remove it first", field="date")
        if is_past(key, self._today()):
            raise ValidationError(f"{key} is in the past", field="date")
        return await self._assign({key})

    async def remove_day(self, day) -> dict:
        return await self._remove(resolve_single(day))

    async def apply_selection(self) -> dict:
        """Confirm the multiple-mode selection (assign, or remove in delete mode)."""
        if self.mode is not AssignmentMode.MULTIPLE:
            raise ValidationError("Nothing to apply outside multiple mode", field="mode")
        targets = resolve_multiple(self.selection)
        result = await (self._remove(targets) if self.delete_mode else self._assign(targets))
        self.selection.clear()
        return result

    async def apply_month(self) -> dict:
        targets = resolve_month(self.year, self.month)
        return await (self._remove(targets) if self.delete_mode else self._assign(targets))

    async def apply_range(self, start, end) -> dict:
        targets = resolve_custom(start, end)
        return await (self._remove(targets) if self.delete_mode else self._assign(targets))

    # -------------------- Mutations --------------------
    def _owners(self, keys: Iterable[str]) -> Dict[str, Set[str]]:
        """Group keys by the id of the plan holding them; free keys are skipped."""
        assignments = self.store.assignments()
        groups: Dict[str, Set[str]] = {}
        for key in keys:
            plan = assignments.get(key)
            if plan is None:
                logger.debug("No plan on %s, skipping", key)
                continue
            groups.setdefault(plan.id, set()).add(key)
        return groups

    async def _assign(self, targets: Set[str]) -> dict:
        client = self._require_client()
        plan = self._require_plan()
        if not targets:
            raise ValidationError("No dates selected", field="dates")
        with self._in_progress("assign a plan"):
            # a day belongs to one plan: release it from any other owner first
            conflicts = {pid: keys for pid, keys in self._owners(targets).items() if pid != plan.id}
            for owner_id, keys in sorted(conflicts.items()):
                await self.store.remove_dates(owner_id, client.id, keys)
            await self.store.assign_dates(plan.id, client.id, targets)
        return {
            "action": "assigned",
            "plan_id": plan.id,
            "dates": sorted(targets),
            "reassigned": sorted(k for keys in conflicts.values() for k in keys),
        }

    async def _remove(self, targets: Set[str]) -> dict:
        client = self._require_client()
        if not targets:
            raise ValidationError("No dates selected", field="dates")
        removed: Dict[str, List[str]] = {}
        with self._in_progress("remove a plan"):
            for owner_id, keys in sorted(self._owners(targets).items()):
                await self.store.remove_dates(owner_id, client.id, keys)
                removed[owner_id] = sorted(keys)
        return {"action": "removed", "removed": removed}

    # -------------------- Rendering --------------------
    def render(self) -> dict:
        selected_plan = self.store.find(self.selected_plan_id) if self.selected_plan_id else None
        view = render_month(
            self.year, self.month, self.store.assignments(),
            selection=self.selection if self.mode is AssignmentMode.MULTIPLE else (),
            today=self._today(), delete_mode=self.delete_mode,
            filter_start=self.filter_start, filter_end=self.filter_end,
        )
        view.update({
            "client": self.client.to_dict() if self.client else None,
            "selected_plan": selected_plan.to_dict() if selected_plan else None,
            "mode": self.mode.value,
            "delete_mode": self.delete_mode,
            "selection": sorted(self.selection),
            "filter": {"start": self.filter_start, "end": self.filter_end},
            "busy": self._busy,
        })
        return view


__all__ = ["CalendarController"]
