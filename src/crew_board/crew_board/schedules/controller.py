from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_key, now_local, parse_hhmm, parse_iso_date
from ..common.web import current_actor, login_required, ok, parse_branch, parse_enum, payload
from ..container import Container
from ..core.enums import ScheduleType
from ..core.exceptions import ValidationError
from .model import SchedulePatch
from .service import describe_start


def _weekdays(value) -> list[int]:
    if isinstance(value, str):
        value = [v for v in value.split(",") if v.strip()]
    try:
        return [int(v) for v in (value or [])]
    except (TypeError, ValueError):
        raise ValidationError("Weekdays must be numbers 0-6")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_month")
    @login_required
    def schedules_month():
        month = request.args.get("month") or month_key(now_local().date())
        rows = container.schedule_service.list_month(month=month, branch=parse_branch(request.args.get("branch")))
        return ok(rows, month=month)

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_add")
    @login_required
    def schedules_add():
        data = payload()
        schedule = container.schedule_service.add_schedule(
            actor=current_actor(),
            employee_id=data.get("employee_id", ""),
            work_date=parse_iso_date(data.get("date", "")),
            start_time=parse_hhmm(data.get("start_time", "")),
            end_time=parse_hhmm(data.get("end_time", "")),
            schedule_type=parse_enum(ScheduleType, data.get("type"), "schedule type", ScheduleType.FIXED),
        )
        return ok(schedule, status=201)

    @app.route("/api/schedules/recurring", methods=["POST"], endpoint="schedules_recurring")
    @login_required
    def schedules_recurring():
        data = payload()
        rows = container.schedule_service.add_recurring(
            actor=current_actor(),
            employee_id=data.get("employee_id", ""),
            month=data.get("month", ""),
            weekdays=_weekdays(data.get("weekdays")),
            start_time=parse_hhmm(data.get("start_time", "")),
            end_time=parse_hhmm(data.get("end_time", "")),
        )
        return ok(rows, status=201, created=len(rows))

    @app.route("/api/schedules/<schedule_id>", methods=["PATCH"], endpoint="schedules_update")
    @login_required
    def schedules_update(schedule_id: str):
        data = payload()
        patch = SchedulePatch(
            work_date=parse_iso_date(data["date"]) if data.get("date") else None,
            start_time=parse_hhmm(data.get("start_time", "")),
            end_time=parse_hhmm(data.get("end_time", "")),
            schedule_type=parse_enum(ScheduleType, data.get("type"), "schedule type"),
        )
        schedule = container.schedule_service.update_schedule(actor=current_actor(), schedule_id=schedule_id, patch=patch)
        return ok(schedule)

    @app.route("/api/schedules/<schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @login_required
    def schedules_delete(schedule_id: str):
        container.schedule_service.delete_schedule(actor=current_actor(), schedule_id=schedule_id)
        return ok()

    @app.route("/api/schedules/next", methods=["GET"], endpoint="schedules_next")
    @login_required
    def schedules_next():
        actor = current_actor()
        now = now_local()
        schedule = container.schedule_service.next_schedule(employee_id=actor.user_id, now=now)
        if not schedule:
            return ok(None)
        return ok(schedule, starts=describe_start(schedule, now))

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @login_required
    def holidays_list():
        month = request.args.get("month")
        rows = container.holiday_service.list_month(month) if month else container.holiday_service.list_all()
        return ok(rows)

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_add")
    @login_required
    def holidays_add():
        data = payload()
        pay = data.get("extra_hourly_pay")
        holiday = container.holiday_service.create(
            actor=current_actor(),
            holiday_date=parse_iso_date(data.get("date", "")),
            name=data.get("name", ""),
            extra_hourly_pay=None if pay in (None, "") else pay,
        )
        return ok(holiday, status=201)
