"""Error hierarchy tests: statuses, response envelope and classification.

Tests cover:
    - Each fixed error carries the expected status and code
    - to_response() envelope shape
    - classify_error(): carried status verbatim, otherwise the converter
    - default/masking converters
"""

from fastapi import HTTPException

from genapi.core.errors import (
    MASKED_INTERNAL_MESSAGE,
    BadRequestError,
    ErrorCategory,
    ErrorContext,
    GenApiError,
    InternalServerError,
    RequestDecodeError,
    ResourceNotFoundError,
    SessionUnavailableError,
    TokenNotFoundError,
    UnauthorizedError,
    carried_status,
    classify_error,
    default_convert_error,
    masking_convert_error,
    request_decode_error,
)


def test_fixed_error_statuses():
    assert BadRequestError("x").http_status == 400
    assert TokenNotFoundError().http_status == 400
    assert UnauthorizedError("x").http_status == 401
    assert ResourceNotFoundError("User", "1").http_status == 404
    assert InternalServerError("x").http_status == 500
    assert SessionUnavailableError().http_status == 500


def test_session_unavailable_message_is_fixed():
    err = SessionUnavailableError()
    assert err.message == "can't get session from context"
    assert err.code == "SESSION_UNAVAILABLE"


def test_to_response_envelope():
    err = UnauthorizedError("session not found")
    body = err.to_response()["error"]
    assert body["code"] == "UNAUTHORIZED"
    assert body["message"] == "session not found"
    assert body["category"] == "authentication"
    assert body["severity"] == "warning"
    assert "timestamp" in body
    assert "details" not in body


def test_to_response_includes_details_when_present():
    err = RequestDecodeError("bad", details=[{"field": "a", "message": "m", "type": "t"}])
    assert err.to_response()["error"]["details"][0]["field"] == "a"


def test_error_context_defaults_timestamp():
    assert ErrorContext().timestamp.tzinfo is not None


def test_classify_keeps_classified_errors():
    err = ResourceNotFoundError("User", "7")
    assert classify_error(err, default_convert_error) is err


def test_classify_uses_carried_status_verbatim():
    class Gone(Exception):
        http_status = 410

    classified = classify_error(Gone("bye"), lambda exc: InternalServerError("never"))
    assert classified.http_status == 410
    assert classified.message == "bye"
    assert classified.category is ErrorCategory.BUSINESS_RULE


def test_classify_http_exception():
    classified = classify_error(HTTPException(503, "down"), default_convert_error)
    assert classified.http_status == 503
    assert classified.message == "down"
    assert classified.category is ErrorCategory.INTERNAL


def test_classify_falls_back_to_converter():
    calls = []

    def convert(exc):
        calls.append(exc)
        return BadRequestError("converted")

    exc = KeyError("k")
    classified = classify_error(exc, convert)
    assert calls == [exc]
    assert classified.http_status == 400


def test_classify_rejects_bad_converter_result():
    classified = classify_error(RuntimeError("x"), lambda exc: None)
    assert classified.http_status == 500


def test_classify_survives_raising_converter():
    def convert(exc):
        raise KeyError("bad converter")

    classified = classify_error(RuntimeError("x"), convert)
    assert isinstance(classified, InternalServerError)
    assert "KeyError" in classified.message


def test_classify_masks_converter_faults_when_asked():
    def convert(exc):
        raise KeyError("internal table name")

    raised = classify_error(RuntimeError("x"), convert, masked=True)
    garbage = classify_error(RuntimeError("x"), lambda exc: None, masked=True)
    assert raised.message == MASKED_INTERNAL_MESSAGE
    assert garbage.message == MASKED_INTERNAL_MESSAGE


def test_request_decode_error_names_first_field():
    err = request_decode_error([
        {"loc": ("times",), "msg": "Input should be a valid integer", "type": "int_parsing"},
        {"loc": ("tags", 0), "msg": "Input should be a valid string", "type": "string_type"},
    ])
    assert err.http_status == 400
    assert err.code == "DECODE_ERROR"
    assert err.message == "Invalid request data: times: Input should be a valid integer"
    assert [d["field"] for d in err.details] == ["times", "tags.0"]


def test_request_decode_error_for_root_level_failure():
    err = request_decode_error([{"loc": (), "msg": "Input should be an object", "type": "model_type"}])
    assert err.message == "Invalid request data: body: Input should be an object"


def test_carried_status_ignores_non_int_and_bool():
    class Weird(Exception):
        http_status = "500"

    class Flag(Exception):
        http_status = True

    assert carried_status(Weird()) is None
    assert carried_status(Flag()) is None
    assert carried_status(ValueError()) is None


def test_default_converter_wraps_as_500_with_message():
    err = default_convert_error(RuntimeError("boom"))
    assert isinstance(err, InternalServerError)
    assert err.http_status == 500
    assert err.message == "boom"


def test_default_converter_names_silent_errors():
    assert default_convert_error(SilentError()).message == "SilentError"


def test_masking_converter_hides_message():
    err = masking_convert_error(RuntimeError("password=hunter2"))
    assert err.message == MASKED_INTERNAL_MESSAGE
    passthrough = BadRequestError("visible")
    assert masking_convert_error(passthrough) is passthrough


def test_genapi_error_is_exception_with_message():
    err = GenApiError("m", "C", ErrorCategory.INTERNAL)
    assert str(err) == "m"
    assert err.http_status == 500


class SilentError(Exception):
    pass
