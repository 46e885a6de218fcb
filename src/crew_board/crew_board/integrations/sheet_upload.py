"""Bulk upload to the spreadsheet script (rows of the month are replaced)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import requests

from ..core.exceptions import ExternalServiceError, ValidationError
from ..exports.csv_export import PAYROLL_SHEET_FIELDS

logger = logging.getLogger(__name__)

ATTENDANCE_SHEET_FIELDS = ["month", "branchCode", "branchName", "employeeName", "date", "status", "minutes"]


@dataclass(frozen=True)
class SheetUploadResult:
    ok: bool
    written: int = 0
    deleted: int = 0
    month: Optional[str] = None
    error: Optional[str] = None


class SheetUploadClient:
    def __init__(self, url: str, *, timeout: float = 30, session: Optional[requests.Session] = None):
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    def _post(self, action: str, payload: Sequence[dict]) -> SheetUploadResult:
        if not payload:
            raise ValidationError("Nothing to upload for this month")
        if not self._url:
            raise ExternalServiceError("Sheet upload endpoint is not configured")

        # sent as text/plain, the script parses the body as JSON
        body = json.dumps({"action": action, "payload": list(payload)}, ensure_ascii=False)
        try:
            logger.info("uploading %d rows (%s)", len(payload), action)
            resp = self._session.post(
                self._url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.Timeout:
            logger.warning("%s timed out", action)
            raise ExternalServiceError("Sheet upload timed out")
        except (requests.RequestException, ValueError) as e:
            logger.error("%s failed: %s", action, e)
            raise ExternalServiceError(f"Sheet upload failed: {e}")

        result = SheetUploadResult(
            ok=bool(data.get("ok")),
            written=int(data.get("written") or 0),
            deleted=int(data.get("deleted") or 0),
            month=data.get("month"),
            error=data.get("error") or data.get("message"),
        )
        if not result.ok:
            logger.error("%s rejected: %s", action, result.error)
            raise ExternalServiceError(f"Sheet upload rejected: {result.error or 'unknown error'}")
        return result

    def upload_payroll(self, rows: Sequence[dict]) -> SheetUploadResult:
        return self._post("uploadPayroll", [{k: r[k] for k in PAYROLL_SHEET_FIELDS} for r in rows])

    def upload_attendance(self, rows: Sequence[dict]) -> SheetUploadResult:
        return self._post("uploadAttendance", [{k: r[k] for k in ATTENDANCE_SHEET_FIELDS} for r in rows])
