import math

import pytest

from reaction_board import InputSanitizer, InvalidReactionTime, is_valid_code
from reaction_board.validation import FULLWIDTH_COMMA, SubmitRequest, validate_submission


def test_sanitize_info_bounds_length_and_strips_delimiters():
    out = InputSanitizer.sanitize_info("a,b\nc" + "x" * 40)
    assert len(out) <= 32
    assert "," not in out
    assert "\n" not in out and "\r" not in out
    assert out.startswith("a" + FULLWIDTH_COMMA + "b c")


def test_sanitize_info_handles_crlf_and_unicode_breaks():
    out = InputSanitizer.sanitize_info("one\r\ntwo three")
    assert out.splitlines() == [out]


def test_sanitize_info_drops_trailing_whitespace_and_nul():
    assert InputSanitizer.sanitize_info("  hi\0 there  ") == "  hi there"


def test_reaction_time_boundaries():
    assert validate_submission(3000).reactionTime == 3000.0
    assert validate_submission(0.001).reactionTime == pytest.approx(0.001)
    for bad in (0, -5, 3000.0001, math.inf, math.nan):
        with pytest.raises(InvalidReactionTime):
            validate_submission(bad)


@pytest.mark.parametrize("bad", ["250", None, True, [250]])
def test_reaction_time_must_be_a_number(bad):
    with pytest.raises(InvalidReactionTime):
        validate_submission(bad)


def test_invalid_reaction_time_is_a_value_error():
    with pytest.raises(ValueError):
        validate_submission(5000)


def test_missing_or_non_text_info_becomes_empty():
    assert validate_submission(250).info == ""
    assert validate_submission(250, info=42).info == ""


def test_malformed_code_is_ignored():
    assert validate_submission(250, code="123456").code == "123456"
    assert validate_submission(250, code="12345").code is None
    assert validate_submission(250, code="12345a").code is None
    assert validate_submission(250, code="123456\n").code is None
    assert validate_submission(250, code=123456).code is None


def test_is_valid_code():
    assert is_valid_code("000000")
    assert not is_valid_code("1234567")
    assert not is_valid_code(None)


def test_submit_request_is_frozen():
    request = SubmitRequest(reactionTime=200, info="a,b")
    assert request.info == "a" + FULLWIDTH_COMMA + "b"
    with pytest.raises(Exception):
        request.info = "changed"


def test_sanitize_info_drops_lone_surrogates():
    assert InputSanitizer.sanitize_info("hi\ud800!") == "hi!"


def test_unencodable_info_does_not_reject_reaction_time():
    request = validate_submission(250, info="ok\udc80")
    assert request.reactionTime == 250.0
    assert request.info == "ok"
