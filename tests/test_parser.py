"""
Unit tests for src/matomo_client/parser.py.

Covers decoding per format, fault-shape classification, and validation of
bulk replies.
"""

from __future__ import annotations

import pytest

from matomo_client.errors import ApiError, DecodeError
from matomo_client.parser import (
    classify_result,
    decode_body,
    is_error_payload,
    parse_response,
    split_bulk_response,
)


class TestDecodeBody:

    def test_json_is_parsed(self):
        assert decode_body('{"nb_visits": 42}', "json") == {"nb_visits": 42}

    @pytest.mark.parametrize("fmt", ["xml", "csv", "tsv", "html", "rss"])
    def test_text_formats_are_returned_verbatim(self, fmt):
        body = "<result>not parsed</result>\n"
        assert decode_body(body, fmt) == body

    def test_malformed_json_raises_decode_error(self):
        with pytest.raises(DecodeError) as info:
            decode_body("<html>Fatal error</html>", "json")
        assert info.value.format == "json"
        assert info.value.body.startswith("<html>")
        assert info.value.category == "invalid_response"

    def test_empty_json_body_raises_decode_error(self):
        with pytest.raises(DecodeError):
            decode_body("", "json")

    def test_unknown_format_raises_decode_error(self):
        with pytest.raises(DecodeError, match="original"):
            decode_body("a:1:{}", "original")

    def test_long_bodies_are_truncated_on_the_error(self):
        with pytest.raises(DecodeError) as info:
            decode_body("x" * 5000, "json")
        assert len(info.value.body) == 200


class TestClassification:

    def test_error_shape_raises_api_error_with_verbatim_message(self):
        payload = {"result": "error", "message": "You can't access this resource as it requires 'view' access."}
        with pytest.raises(ApiError) as info:
            classify_result(payload, "VisitsSummary.get")
        assert info.value.message == payload["message"]
        assert info.value.method == "VisitsSummary.get"
        assert info.value.category == "api_error"

    def test_success_result_is_returned(self):
        payload = {"result": "success", "message": "ok"}
        assert classify_result(payload) is payload

    @pytest.mark.parametrize("value", [[], [{"result": "error"}], "error", 0, None, {"value": "error"}])
    def test_only_a_mapping_with_result_error_is_a_fault(self, value):
        assert not is_error_payload(value)
        assert classify_result(value) == value

    def test_text_formats_are_never_classified(self):
        body = '{"result":"error","message":"x"}'
        assert parse_response(body, "csv") == body

    def test_json_fault_is_raised_by_parse_response(self):
        with pytest.raises(ApiError, match="Invalid token"):
            parse_response('{"result":"error","message":"Invalid token"}', "json")


class TestBulkReply:

    def test_list_of_expected_length_is_returned(self):
        assert split_bulk_response([1, 2, 3], 3) == [1, 2, 3]

    def test_non_list_reply_raises(self):
        with pytest.raises(DecodeError, match="JSON array"):
            split_bulk_response({"value": 1}, 1)

    def test_length_mismatch_raises(self):
        with pytest.raises(DecodeError, match="2 items for 3"):
            split_bulk_response([1, 2], 3)
