from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, RequestType
from .model import ApprovalRequest


class RequestRepository(Protocol):
    def get(self, request_id: str) -> Optional[ApprovalRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        substitute_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        request_type: Optional[RequestType] = None,
        limit: int = 200,
    ) -> Sequence[ApprovalRequest]:
        """Newest request_date first."""

        raise NotImplementedError

    def create(self, request: ApprovalRequest) -> str:
        raise NotImplementedError

    def update(self, request: ApprovalRequest) -> bool:
        raise NotImplementedError

    def delete(self, request_id: str) -> bool:
        raise NotImplementedError
