from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_duration, month_key, normalize_month, now_local, parse_iso_date
from ..common.web import current_actor, login_required, manager_required, ok, parse_branch, payload
from ..container import Container
from ..core.exceptions import AuthorizationError, ValidationError
from ..database.mysql_base import month_bounds
from ..exports.csv_export import attendance_rows, build_attendance_csv
from ..integrations.legacy_clock import LEGACY_CLOCK_ACTIONS


def register(app: Flask, container: Container) -> None:
    def _crew_only():
        actor = current_actor()
        if actor.is_manager:
            raise AuthorizationError("The manager account has no attendance")
        return actor

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        """Crew dashboard: open shift, live timer, today's minutes, pending clock-in ask."""

        actor = _crew_only()
        now = now_local()
        svc = container.attendance_service
        today_minutes = svc.minutes_on(actor.user_id, now.date())
        return ok(
            {
                "active_record": svc.active_record(actor.user_id),
                "elapsed": svc.live_elapsed(actor.user_id, now=now),
                "today_minutes": today_minutes,
                "today_worked": format_duration(today_minutes),
                "pending_clock_in": svc.pending_clock_in_request(actor.user_id, now.date()),
                "decision": svc.evaluate_clock_in(actor.user_id, now=now),
            }
        )

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @login_required
    def attendance_clock_in():
        actor = _crew_only()
        confirm = str(payload().get("confirm_late", "")).lower() in {"1", "true", "yes"}
        record = container.attendance_service.clock_in(actor.user_id, confirm_late=confirm)
        return ok(record, status=201)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @login_required
    def attendance_clock_out():
        actor = _crew_only()
        return ok(container.attendance_service.clock_out(actor.user_id))

    @app.route("/api/attendance/daily", methods=["GET"], endpoint="attendance_daily")
    @login_required
    def attendance_daily():
        day_s = request.args.get("date")
        day = parse_iso_date(day_s) if day_s else now_local().date()
        branch = parse_branch(request.args.get("branch"))
        svc = container.attendance_service
        now = now_local()
        records = svc.list_for_date(day, branch=branch)
        return ok(
            {
                "summary": svc.daily_summary(day, branch=branch),
                "records": records,
                "elapsed": {r.record_id: svc.live_elapsed(r.employee_id, now=now) for r in records if r.is_open},
            }
        )

    @app.route("/api/attendance/<record_id>", methods=["PATCH"], endpoint="attendance_correct")
    @login_required
    def attendance_correct(record_id: str):
        data = payload()
        record = container.attendance_service.correct_record(
            actor=current_actor(),
            record_id=record_id,
            clock_in=data.get("clock_in", ""),
            clock_out=data.get("clock_out", "") or "",
        )
        return ok(record)

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="attendance_delete")
    @login_required
    def attendance_delete(record_id: str):
        container.attendance_service.delete_record(actor=current_actor(), record_id=record_id)
        return ok()

    def _month_export_rows(month: str):
        month = normalize_month(month)
        start, end = month_bounds(month)
        records = container.attendance_repo.list_range(start=start, end=end)
        employees = {e.employee_id: e for e in container.employees_repo.list_all()}
        return month, records, employees

    @app.route("/api/attendance/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    @manager_required
    def attendance_export_csv():
        month = request.args.get("month") or month_key(now_local().date())
        month, records, employees = _month_export_rows(month)
        csv_bytes = build_attendance_csv(month, records, employees)
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{month}.csv"},
        )

    @app.route("/api/attendance/upload", methods=["POST"], endpoint="attendance_upload")
    @manager_required
    def attendance_upload():
        month = payload().get("month") or month_key(now_local().date())
        month, records, employees = _month_export_rows(month)
        rows = attendance_rows(month, records, employees)
        if not rows:
            raise ValidationError("No settled attendance to upload for this month")
        return ok(container.sheet_upload.upload_attendance(rows))

    @app.route("/api/legacy-clock/<action>", methods=["POST"], endpoint="legacy_clock")
    def legacy_clock(action: str):
        """Spreadsheet clock-in/out kept for branches still on it; not written to attendance."""

        if action not in LEGACY_CLOCK_ACTIONS:
            raise ValidationError(f"Unknown clock action: {action}")
        data = payload()
        result = container.legacy_clock.call(action, phone_suffix=data.get("phone_suffix", ""), pin=data.get("pin", ""))
        if not result.success:
            raise ValidationError(result.message)
        return ok(result)
