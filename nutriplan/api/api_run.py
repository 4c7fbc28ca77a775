from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, APIRouter, Body, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from nutriplan.domain.errors import PlannerError
from nutriplan.domain.Session import Session
from nutriplan.events.Event_Bus import EventBus
from nutriplan.events.web_observers import NoticeFeed
from nutriplan.infra.MealPlan_Api import MealPlanApi
from nutriplan.infra.Plan_Store import PlanStore
from nutriplan.infra.plan_refresher import PlanRefresher
from nutriplan.logic.calendar.controller import CalendarController
from nutriplan.logic.reporting.schedule import summarize_month
from nutriplan.utilities.config import (
    REFRESH_INTERVAL,
    SESSION_ROLE,
    SESSION_TOKEN,
    SESSION_USER_ID,
)
from nutriplan.utilities.date_keys import normalize_key
from nutriplan.utilities.validators import CalendarRangeInput, ModeInput

# Logging
logger = logging.getLogger("nutriplan_app")


class DeleteModeInput(BaseModel):
    enabled: bool


class MonthInput(BaseModel):
    delta: int = 0
    year: Optional[int] = None
    month: Optional[int] = None


class FilterInput(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class ChoosePlanInput(BaseModel):
    plan_id: Optional[str] = None


def build_controller(session: Optional[Session] = None, bus: Optional[EventBus] = None,
                     api: Optional[MealPlanApi] = None) -> CalendarController:
    """Wire gateway, store and controller for one signed-in dietitian."""
    session = session or Session(SESSION_USER_ID, SESSION_TOKEN, SESSION_ROLE)
    api = api or MealPlanApi(session)
    return CalendarController(session, PlanStore(api, bus=bus))


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "details": exc.details},
    )


def _ok(data=None, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def create_app(controller: Optional[CalendarController] = None,
               refresh_interval: float = REFRESH_INTERVAL) -> FastAPI:
    if controller is None:
        controller = build_controller(bus=EventBus())
    elif controller.store.bus is None:
        controller.store.bus = EventBus()
    bus = controller.store.bus
    notices = NoticeFeed()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        notices.start(bus)
        refresher = PlanRefresher(controller.store, refresh_interval) if refresh_interval > 0 else None
        if refresher:
            refresher.start()
            logger.info("Plan refresher running every %ss", refresh_interval)
        try:
            yield
        finally:
            if refresher:
                await refresher.stop()
            notices.stop()
            await controller.store.api.aclose()

    app = FastAPI(title="Dietitian Meal Plan Calendar", lifespan=lifespan)
    app.add_exception_handler(PlannerError, planner_error_handler)
    app.state.controller = controller
    app.state.notices = notices
    router = APIRouter(prefix="/api")

    # -------------------- Clients & plans --------------------
    @router.get("/clients")
    async def list_clients():
        clients = await controller.load_clients()
        return _ok([c.to_dict() for c in clients])

    @router.post("/clients/{client_id}/select")
    async def select_client(client_id: str):
        plans = await controller.select_client(client_id)
        return _ok([p.to_dict() for p in plans])

    @router.get("/plans")
    async def list_plans():
        return _ok([p.to_dict() for p in controller.store.plans])

    @router.post("/plans", status_code=201)
    async def create_plan(draft: dict = Body(...)):
        plan = await controller.create_plan(draft)
        return _ok(plan.to_dict(), f'Plan "{plan.plan_name}" created successfully!')

    @router.delete("/plans/{plan_id}")
    async def delete_plan(plan_id: str):
        await controller.delete_plan(plan_id)
        return _ok(message="Plan deleted successfully!")

    # -------------------- Calendar state --------------------
    @router.get("/calendar")
    async def calendar_view():
        return _ok(controller.render())

    @router.post("/calendar/plan")
    async def choose_plan(body: ChoosePlanInput):
        controller.choose_plan(body.plan_id)
        return _ok(controller.render())

    @router.post("/calendar/mode")
    async def set_mode(body: ModeInput):
        controller.set_mode(body.mode)
        return _ok(controller.render())

    @router.post("/calendar/delete-mode")
    async def set_delete_mode(body: DeleteModeInput):
        controller.set_delete_mode(body.enabled)
        return _ok(controller.render())

    @router.post("/calendar/month")
    async def change_month(body: MonthInput):
        if body.year is not None and body.month is not None:
            controller.show_month(body.year, body.month)
        else:
            controller.change_month(body.delta)
        return _ok(controller.render())

    @router.post("/calendar/today")
    async def go_to_today():
        controller.go_to_today()
        return _ok(controller.render())

    @router.post("/calendar/filter")
    async def set_filter(body: FilterInput):
        controller.set_filter(body.start, body.end)
        return _ok(controller.render())

    # -------------------- Calendar actions --------------------
    @router.get("/calendar/days/{date_key}")
    async def view_day(date_key: str):
        return _ok(controller.view_plan(date_key))

    @router.post("/calendar/days/{date_key}/click")
    async def click_day(date_key: str):
        return _ok(await controller.click_day(date_key))

    @router.post("/calendar/days/{date_key}/toggle")
    async def toggle_day(date_key: str):
        key = normalize_key(date_key)
        selected = controller.toggle_day(key)
        return _ok({"date": key, "selected": selected})

    @router.post("/calendar/apply")
    async def apply_selection():
        return _ok(await controller.apply_selection())

    @router.post("/calendar/apply-month")
    async def apply_month():
        return _ok(await controller.apply_month())

    @router.post("/calendar/apply-range")
    async def apply_range(body: CalendarRangeInput):
        return _ok(await controller.apply_range(body.start, body.end))

    # -------------------- Reporting & notices --------------------
    @router.get("/summary")
    async def month_summary(year: Optional[int] = Query(default=None), month: Optional[int] = Query(default=None, ge=1, le=12)):
        year = year if year is not None else controller.year
        month = month if month is not None else controller.month
        return _ok(summarize_month(controller.store.plans, year, month))

    @router.get("/notices")
    async def list_notices(since: Optional[int] = Query(default=None)):
        return notices.get_notices(since)

    app.include_router(router)
    return app


app = create_app()
