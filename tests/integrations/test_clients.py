import json

import pytest
import requests

from src.crew_board.crew_board.core.exceptions import ExternalServiceError, ValidationError
from src.crew_board.crew_board.integrations.legacy_clock import LegacyClockClient
from src.crew_board.crew_board.integrations.sheet_upload import SheetUploadClient


class FakeResponse:
    def __init__(self, data=None, status_code=200):
        self._data = data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._data is None:
            raise ValueError("not json")
        return self._data


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _answer(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._answer("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._answer("POST", url, kwargs)


def test_legacy_clock_sends_action_and_credentials():
    session = FakeSession(FakeResponse({"result": "success", "message": "Clocked in 09:01"}))
    client = LegacyClockClient("https://clock.example/exec", session=session)

    result = client.call("checkin", phone_suffix="4444", pin="1234")

    assert result.success
    assert result.message == "Clocked in 09:01"
    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert kwargs["params"] == {"action": "checkin", "phoneSuffix": "4444", "pin": "1234"}


def test_legacy_clock_failure_answer_is_passed_through():
    session = FakeSession(FakeResponse({"result": "error"}))

    result = LegacyClockClient("https://clock.example/exec", session=session).call(
        "status", phone_suffix="4444", pin="1234"
    )

    assert not result.success
    assert result.message == "The clock server reported an error"


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.Timeout()),
        FakeSession(error=requests.ConnectionError()),
        FakeSession(FakeResponse(status_code=500, data={})),
        FakeSession(FakeResponse(data=None)),
    ],
)
def test_legacy_clock_transport_errors(session):
    client = LegacyClockClient("https://clock.example/exec", session=session)

    with pytest.raises(ExternalServiceError):
        client.call("checkout", phone_suffix="4444", pin="1234")


def test_legacy_clock_input_checks():
    client = LegacyClockClient("https://clock.example/exec", session=FakeSession())
    with pytest.raises(ValidationError):
        client.call("dance", phone_suffix="4444", pin="1234")
    with pytest.raises(ValidationError):
        client.call("checkin", phone_suffix="44", pin="1234")
    with pytest.raises(ExternalServiceError):
        LegacyClockClient("", session=FakeSession()).call("checkin", phone_suffix="4444", pin="1234")


ATTENDANCE_ROW = {
    "month": "2024-05",
    "branchCode": "GDXC",
    "branchName": "GDXC",
    "employeeName": "Han Bora",
    "date": "2024-05-03",
    "status": "OFF",
    "minutes": 480,
    "extra": "dropped",
}


def test_sheet_upload_posts_plain_text_json():
    session = FakeSession(FakeResponse({"ok": True, "written": 1, "deleted": 3, "month": "2024-05"}))
    client = SheetUploadClient("https://sheet.example/exec", session=session)

    result = client.upload_attendance([ATTENDANCE_ROW])

    assert (result.written, result.deleted, result.month) == (1, 3, "2024-05")
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert kwargs["headers"]["Content-Type"] == "text/plain;charset=utf-8"
    body = json.loads(kwargs["data"].decode("utf-8"))
    assert body["action"] == "uploadAttendance"
    assert "extra" not in body["payload"][0]
    assert body["payload"][0]["employeeName"] == "Han Bora"


def test_sheet_upload_rejection_raises():
    session = FakeSession(FakeResponse({"ok": False, "error": "sheet locked"}))
    client = SheetUploadClient("https://sheet.example/exec", session=session)

    with pytest.raises(ExternalServiceError, match="sheet locked"):
        client.upload_attendance([ATTENDANCE_ROW])


def test_sheet_upload_needs_rows_and_url():
    with pytest.raises(ValidationError):
        SheetUploadClient("https://sheet.example/exec", session=FakeSession()).upload_payroll([])
    with pytest.raises(ExternalServiceError):
        SheetUploadClient("", session=FakeSession()).upload_attendance([ATTENDANCE_ROW])
