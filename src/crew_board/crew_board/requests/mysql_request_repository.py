from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RequestStatus, RequestType, SubstituteStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import ApprovalRequest
from .repository import RequestRepository

_COLUMNS = """
    request_id, employee_id, request_type, description, status, request_date, target_date,
    start_time, end_time, expense_amount, proof_image_url, substitute_id, substitute_status
"""


def _to_request(r: dict) -> ApprovalRequest:
    amount = r.get("expense_amount")
    return ApprovalRequest(
        request_id=str(r["request_id"]),
        employee_id=str(r["employee_id"]),
        request_type=RequestType(r["request_type"]),
        description=r.get("description") or "",
        status=RequestStatus(r["status"]),
        request_date=normalize_mysql_date(r["request_date"]),
        target_date=normalize_mysql_date(r["target_date"]),
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
        expense_amount=int(amount) if amount is not None else None,
        proof_image_url=r.get("proof_image_url"),
        substitute_id=r.get("substitute_id"),
        substitute_status=SubstituteStatus(r["substitute_status"]) if r.get("substitute_status") else None,
    )


def _params(req: ApprovalRequest) -> tuple:
    return (
        req.employee_id,
        req.request_type.value,
        req.description,
        req.status.value,
        req.request_date,
        req.target_date,
        req.start_time,
        req.end_time,
        req.expense_amount,
        req.proof_image_url,
        req.substitute_id,
        req.substitute_status.value if req.substitute_status else None,
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, request_id: str) -> Optional[ApprovalRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM approval_requests WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        substitute_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        request_type: Optional[RequestType] = None,
        limit: int = 200,
    ) -> Sequence[ApprovalRequest]:
        clauses = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if substitute_id is not None:
            clauses.append("substitute_id=%s")
            params.append(substitute_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if request_type is not None:
            clauses.append("request_type=%s")
            params.append(request_type.value)

        where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM approval_requests
                {where}
                ORDER BY request_date DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def create(self, request: ApprovalRequest) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO approval_requests({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (request.request_id,) + _params(request),
            )
            return request.request_id

    def update(self, request: ApprovalRequest) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE approval_requests
                SET employee_id=%s, request_type=%s, description=%s, status=%s, request_date=%s,
                    target_date=%s, start_time=%s, end_time=%s, expense_amount=%s, proof_image_url=%s,
                    substitute_id=%s, substitute_status=%s
                WHERE request_id=%s
                """,
                _params(request) + (request.request_id,),
            )
            return cur.rowcount > 0

    def delete(self, request_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM approval_requests WHERE request_id=%s", (request_id,))
            return cur.rowcount > 0
