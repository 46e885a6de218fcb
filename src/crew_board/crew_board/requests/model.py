from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus, RequestType, SubstituteStatus


@dataclass(frozen=True)
class ApprovalRequest:
    """A crew member's request waiting for (or past) a manager decision.

    ``substitute_id``/``substitute_status`` are only set on SUBSTITUTE requests; a missing
    substitute status means the colleague has not answered yet.
    """

    request_id: str
    employee_id: str
    request_type: RequestType
    description: str
    status: RequestStatus
    request_date: date
    target_date: date
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    expense_amount: Optional[int] = None
    proof_image_url: Optional[str] = None
    substitute_id: Optional[str] = None
    substitute_status: Optional[SubstituteStatus] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def awaiting_colleague(self) -> bool:
        return self.request_type == RequestType.SUBSTITUTE and self.substitute_status in (
            None,
            SubstituteStatus.PENDING,
        )
