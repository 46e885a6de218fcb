from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_key, now_local
from ..common.web import current_actor, login_required, manager_required, ok, parse_branch, payload
from ..container import Container
from ..exports.csv_export import build_payroll_csv, payroll_rows


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    def _month(value) -> str:
        return value or month_key(now_local().date())

    @app.route("/api/payroll/statement", methods=["GET"], endpoint="payroll_statement")
    @login_required
    def payroll_statement():
        actor = current_actor()
        employee_id = request.args.get("employee_id") or actor.user_id
        statement = svc.statement(actor=actor, employee_id=employee_id, month=_month(request.args.get("month")))
        return ok(statement)

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_table")
    @manager_required
    def payroll_table():
        table = svc.branch_payroll(
            actor=current_actor(),
            month=_month(request.args.get("month")),
            branch=parse_branch(request.args.get("branch")),
        )
        return ok(payroll_rows(table), month=table.month, count=table.count, total_net_pay=table.total_net_pay)

    @app.route("/api/payroll/export.csv", methods=["GET"], endpoint="payroll_export_csv")
    @manager_required
    def payroll_export_csv():
        table = svc.branch_payroll(
            actor=current_actor(),
            month=_month(request.args.get("month")),
            branch=parse_branch(request.args.get("branch")),
        )
        return app.response_class(
            build_payroll_csv(table),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=payroll_{table.month}.csv"},
        )

    @app.route("/api/payroll/upload", methods=["POST"], endpoint="payroll_upload")
    @manager_required
    def payroll_upload():
        data = payload()
        table = svc.branch_payroll(
            actor=current_actor(),
            month=_month(data.get("month")),
            branch=parse_branch(data.get("branch")),
        )
        return ok(container.sheet_upload.upload_payroll(payroll_rows(table)))
