"""Tests for ActionResult, the gateway response model and the error taxonomy."""

import logging

import pytest

from sendcloud_sms.errors import ErrorCode, SMSError, SMSTransportError, TemplateNotFoundError
from sendcloud_sms.models import ActionResult, SendCloudResponse, parse_response


class TestParseResponse:
    def test_success_round_trip(self):
        body = b'{"result":true,"statusCode":200,"message":"OK"}'
        assert parse_response(body) == ActionResult(True, 200, "OK", None)

    def test_all_fields(self):
        body = '{"result": false, "statusCode": 311, "message": "bad phone", "info": {"n": [1]}}'
        assert parse_response(body) == ActionResult(False, 311, "bad phone", {"n": [1]})

    def test_result_only(self):
        assert parse_response(b'{"result": true}') == ActionResult(True)

    @pytest.mark.parametrize("body", [None, b"", b"not json", b"[]", b"42"])
    def test_malformed_degrades_to_failure(self, body):
        assert parse_response(body) == ActionResult(False, None, None, None)

    def test_missing_result_keeps_code_and_message(self):
        body = b'{"statusCode":500,"message":"Internal error"}'
        assert parse_response(body) == ActionResult(False, 500, "Internal error", None)

    @pytest.mark.parametrize("flag", ['"yes"', '"true"', "1"])
    def test_result_flag_must_be_a_json_boolean(self, flag):
        body = '{"result": ' + flag + ', "statusCode": 200}'
        assert parse_response(body) == ActionResult(False)

    def test_malformed_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sendcloud_sms.models"):
            parse_response(b"<html>")
        assert "Unparseable response" in caplog.text

    def test_wire_aliases(self):
        response = SendCloudResponse.model_validate({"result": True, "statusCode": 200})
        assert response.status_code == 200


class TestActionResult:
    def test_rejected(self):
        result = ActionResult.rejected(ErrorCode.NO_NUMBERS)
        assert result == ActionResult(False, -1, "No Numbers")
        assert ActionResult.rejected(ErrorCode.TOO_MANY_NUMBERS).message == "Max 2000 Items"

    def test_immutable(self):
        result = ActionResult(True)
        with pytest.raises(AttributeError):
            result.success = False  # type: ignore[misc]


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(TemplateNotFoundError, SMSError)
        assert issubclass(SMSTransportError, SMSError)

    def test_template_not_found_messages(self):
        assert "id='7'" in str(TemplateNotFoundError("code", template_id="7"))
        assert "country='JP'" in str(TemplateNotFoundError("default", country="JP"))
        assert "several countries" in str(TemplateNotFoundError("default"))
