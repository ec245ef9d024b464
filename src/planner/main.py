from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Any, Callable

from fastapi import APIRouter, FastAPI, HTTPException, Path, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from .domain.calendar_math import (
    days_between,
    format_date_for_display,
    format_date_for_input,
    format_month_year,
    next_month,
    previous_month,
)
from .domain.models import (
    CalendarDay,
    CalendarMonth,
    Event,
    EventFormData,
    MutationConflict,
    MutationResult,
    Occurrence,
)
from .engine import EventNotFoundError
from .scheduler import build_scheduler, run_backup_job
from .services.events import EventService, build_event_service
from .settings import AppSettings, load_settings
from .storage import EventStoreError, initialize_database, list_backups

MAX_AGENDA_DAYS = 366

router = APIRouter()


class MoveRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    date: date


def _today(settings: AppSettings) -> date:
    return datetime.now(settings.timezone).date()


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_service(request: Request) -> EventService:
    return request.app.state.event_service


def _event_payload(event: Event) -> dict[str, Any]:
    return event.model_dump(mode="json")


def _occurrence_payload(occurrence: Occurrence) -> dict[str, Any]:
    payload = _event_payload(occurrence.event)
    payload.update(
        {
            "occurrence_date": format_date_for_input(occurrence.occurrence_date),
            "is_instance": occurrence.is_instance,
            "source_event_id": occurrence.source_event_id,
        }
    )
    return payload


def _day_payload(day: CalendarDay) -> dict[str, Any]:
    return {
        "date": format_date_for_input(day.date),
        "label": format_date_for_display(day.date),
        "is_in_target_month": day.is_in_target_month,
        "is_today": day.is_today,
        "occurrences": [_occurrence_payload(item) for item in day.occurrences],
    }


def _month_link(anchor: date, step: Callable[[date], date]) -> dict[str, Any] | None:
    try:
        target = step(anchor)
    except OverflowError:
        # No month exists before year 1 or after year 9999.
        return None
    return {"year": target.year, "month": target.month, "label": format_month_year(target)}


def _month_payload(month: CalendarMonth) -> dict[str, Any]:
    anchor = date(month.year, month.month, 1)
    return {
        "year": month.year,
        "month": month.month,
        "label": month.label,
        "previous": _month_link(anchor, previous_month),
        "next": _month_link(anchor, next_month),
        # The grids of January 0001 and December 9999 are cut short at the calendar edges.
        "weeks": -(-len(month.days) // 7),
        "days": [_day_payload(day) for day in month.days],
    }


def _mutation_response(result: MutationResult, *, success_status: int = 200) -> JSONResponse:
    if isinstance(result, MutationConflict):
        return JSONResponse(
            {
                "status": "conflict",
                "conflicting": _occurrence_payload(result.conflicting),
                "proposed": _event_payload(result.proposed),
            },
            status_code=409,
        )
    return JSONResponse(
        {
            "status": "ok",
            "event": _event_payload(result.event) if result.event else None,
            "count": len(result.events),
        },
        status_code=success_status,
    )


@router.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    backups = list_backups(settings.backup_path)
    started_at_utc: datetime = request.app.state.started_at_utc
    now_utc = datetime.now(timezone.utc)
    return JSONResponse(
        {
            "status": "ok",
            "service": "planner",
            "environment": settings.env.planner_env,
            "timezone": settings.env.planner_timezone,
            "scheduler_running": request.app.state.scheduler.running,
            "event_count": len(_get_service(request).list_events()),
            "backup_count": len(backups),
            "latest_backup": backups[-1].name if backups else None,
            "started_at_utc": started_at_utc.isoformat(),
            "uptime_seconds": int((now_utc - started_at_utc).total_seconds()),
            "timestamp_utc": now_utc.isoformat(),
        }
    )


@router.get("/api/settings", response_class=JSONResponse)
async def ui_settings(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    event_settings = settings.yaml.events
    return JSONResponse(
        {
            "title": settings.yaml.ui.title,
            "colors": event_settings.colors,
            "default_color": event_settings.default_color,
            "default_start_time": event_settings.default_start_time.strftime("%H:%M"),
            "default_end_time": event_settings.default_end_time.strftime("%H:%M"),
        }
    )


@router.get("/api/months/{year}/{month}", response_class=JSONResponse)
async def month_view(
    request: Request,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    q: str | None = None,
) -> JSONResponse:
    settings = _get_settings(request)
    calendar_month = _get_service(request).month_view(
        date(year, month, 1),
        today=_today(settings),
        term=q,
    )
    return JSONResponse(_month_payload(calendar_month))


@router.get("/api/days/{day}", response_class=JSONResponse)
async def day_view(request: Request, day: date, q: str | None = None) -> JSONResponse:
    occurrences = _get_service(request).day_view(day, q)
    return JSONResponse(
        {
            "date": format_date_for_input(day),
            "label": format_date_for_display(day),
            "count": len(occurrences),
            "occurrences": [_occurrence_payload(item) for item in occurrences],
        }
    )


@router.get("/api/occurrences", response_class=JSONResponse)
async def agenda(
    request: Request,
    start: date = Query(),
    end: date = Query(),
    q: str | None = None,
) -> JSONResponse:
    span = days_between(start, end)
    if span < 0:
        raise HTTPException(status_code=422, detail="end must not be before start")
    if span >= MAX_AGENDA_DAYS:
        raise HTTPException(status_code=422, detail=f"range must cover at most {MAX_AGENDA_DAYS} days")

    occurrences = _get_service(request).agenda(start, end, q)
    return JSONResponse(
        {
            "start": format_date_for_input(start),
            "end": format_date_for_input(end),
            "count": len(occurrences),
            "occurrences": [_occurrence_payload(item) for item in occurrences],
        }
    )


@router.get("/api/events", response_class=JSONResponse)
async def list_events(request: Request, q: str | None = None) -> JSONResponse:
    events = _get_service(request).list_events(q)
    return JSONResponse({"count": len(events), "events": [_event_payload(event) for event in events]})


@router.post("/api/events", response_class=JSONResponse)
async def create_event(request: Request, form: EventFormData) -> JSONResponse:
    return _mutation_response(_get_service(request).create(form), success_status=201)


@router.post("/api/events/force", response_class=JSONResponse)
async def force_event(request: Request, proposed: Event) -> JSONResponse:
    return _mutation_response(_get_service(request).force_apply(proposed))


@router.put("/api/events/{event_id}", response_class=JSONResponse)
async def update_event(request: Request, event_id: str, form: EventFormData) -> JSONResponse:
    return _mutation_response(_get_service(request).update(event_id, form))


@router.post("/api/events/{event_id}/move", response_class=JSONResponse)
async def move_event(request: Request, event_id: str, body: MoveRequest) -> JSONResponse:
    return _mutation_response(_get_service(request).move(event_id, body.date))


@router.delete("/api/events/{event_id}", response_class=JSONResponse)
async def delete_event(request: Request, event_id: str, all_in_series: bool = False) -> JSONResponse:
    result = _get_service(request).delete(event_id, delete_all_in_series=all_in_series)
    return JSONResponse(
        {
            "status": "ok",
            "deleted": result.event.id if result.event else None,
            "count": len(result.events),
        }
    )


async def _event_not_found_handler(request: Request, exc: EventNotFoundError) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=404)


async def _event_store_error_handler(request: Request, exc: EventStoreError) -> JSONResponse:
    return JSONResponse({"detail": str(exc)}, status_code=503)


def create_app(settings: AppSettings | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(application: FastAPI):
        resolved = settings if settings is not None else load_settings()
        initialize_database(resolved.db_path)
        if resolved.yaml.backup.enabled:
            run_backup_job(resolved)
        scheduler = build_scheduler(resolved)
        scheduler.start()

        application.state.settings = resolved
        application.state.event_service = build_event_service(resolved)
        application.state.scheduler = scheduler
        application.state.started_at_utc = datetime.now(timezone.utc)

        try:
            yield
        finally:
            if scheduler.running:
                scheduler.shutdown(wait=False)

    application = FastAPI(title="Planner", version="0.1.0", lifespan=lifespan)
    application.include_router(router)
    application.add_exception_handler(EventNotFoundError, _event_not_found_handler)
    application.add_exception_handler(EventStoreError, _event_store_error_handler)
    return application


app = create_app()
