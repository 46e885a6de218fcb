from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import current_actor, login_required, manager_required, ok, parse_enum, payload
from ..container import Container
from ..core.enums import ClockInBlockReason, RequestStatus, RequestType
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    svc = container.request_service

    def _target_date(data):
        value = data.get("target_date")
        return parse_iso_date(value) if value else now_local().date()

    @app.route("/api/requests", methods=["POST"], endpoint="requests_submit")
    @login_required
    def requests_submit():
        actor = current_actor()
        data = payload()
        request_type = parse_enum(RequestType, data.get("type"), "request type")
        if request_type is None:
            raise ValidationError("Request type is required")

        if request_type == RequestType.EXPENSE:
            req = svc.submit_expense(
                actor=actor,
                target_date=_target_date(data),
                description=data.get("description", ""),
                amount=data.get("expense_amount"),
                proof_image_url=data.get("proof_image_url"),
            )
        elif request_type == RequestType.CLOCK_IN:
            req = svc.submit_clock_in(
                actor=actor,
                reason=parse_enum(ClockInBlockReason, data.get("reason"), "reason", ClockInBlockReason.NO_SCHEDULE),
                note=data.get("description", ""),
            )
        elif request_type == RequestType.SUBSTITUTE:
            req = svc.submit_substitute(
                actor=actor,
                schedule_id=data.get("schedule_id", ""),
                substitute_id=data.get("substitute_id", ""),
            )
        else:
            req = svc.submit_timed(
                actor=actor,
                request_type=request_type,
                target_date=_target_date(data),
                description=data.get("description", ""),
                start_time=data.get("start_time", "") or "",
                end_time=data.get("end_time", "") or "",
            )
        return ok(req, status=201)

    @app.route("/api/requests/mine", methods=["GET"], endpoint="requests_mine")
    @login_required
    def requests_mine():
        return ok(svc.list_mine(actor=current_actor()))

    @app.route("/api/requests/substitutes", methods=["GET"], endpoint="requests_substitutes")
    @login_required
    def requests_substitutes():
        return ok(svc.list_received_substitutes(actor=current_actor()))

    @app.route("/api/requests/<request_id>", methods=["DELETE"], endpoint="requests_cancel")
    @login_required
    def requests_cancel(request_id: str):
        svc.cancel(actor=current_actor(), request_id=request_id)
        return ok()

    @app.route("/api/requests/<request_id>/substitute-response", methods=["POST"], endpoint="requests_substitute_response")
    @login_required
    def requests_substitute_response(request_id: str):
        accept = str(payload().get("accept", "")).lower() in {"1", "true", "yes"}
        return ok(svc.respond_to_substitute(actor=current_actor(), request_id=request_id, accept=accept))

    @app.route("/api/requests", methods=["GET"], endpoint="requests_queue")
    @manager_required
    def requests_queue():
        status_s = request.args.get("status", RequestStatus.PENDING.value)
        status = None if status_s == "ALL" else parse_enum(RequestStatus, status_s, "status")
        return ok(svc.list_for_manager(actor=current_actor(), status=status), pending=svc.pending_count())

    @app.route("/api/requests/<request_id>/decision", methods=["POST"], endpoint="requests_decide")
    @manager_required
    def requests_decide(request_id: str):
        decision = parse_enum(RequestStatus, payload().get("decision"), "decision")
        if decision not in (RequestStatus.APPROVED, RequestStatus.REJECTED):
            raise ValidationError("Decision must be APPROVED or REJECTED")
        req = svc.decide(actor=current_actor(), request_id=request_id, approve=decision == RequestStatus.APPROVED)
        return ok(req)
