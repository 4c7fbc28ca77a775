"""Scheduled refresh of the loaded client's plans.

timer -> fetch -> diff -> merge. A fetch that overlaps a store mutation is
dropped and the next tick tries again. Runs as an asyncio task next to the
controller; a failed fetch is logged and the projection is left alone until
the next tick.
"""
import asyncio
import logging
from typing import Dict, List, Optional

from nutriplan.domain.errors import RemoteError
from nutriplan.events.event_helpers import publish_plans_refreshed
from nutriplan.infra.Plan_Store import PlanStore

logger = logging.getLogger(__name__)


class PlanRefresher:
    def __init__(self, store: PlanStore, interval: float):
        if interval <= 0:
            raise ValueError("Refresh interval must be positive")
        self.store = store
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> Optional[Dict[str, List[str]]]:
        client_id = self.store.client_id
        if client_id is None:
            return None
        generation = self.store.generation
        try:
            plans = await self.store.api.list_client_plans(client_id)
        except RemoteError as exc:
            logger.warning("Plan refresh for client %s failed: %s", client_id, exc.message)
            return None
        diff = self.store.merge_remote(client_id, plans, generation)
        if diff and any(diff.values()):
            logger.info("Plan refresh for client %s: %s", client_id, diff)
            publish_plans_refreshed(client_id, diff, bus=self.store.bus)
        return diff

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            await self.refresh_once()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
