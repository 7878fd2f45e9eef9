from core.errors import (
    USER_MESSAGES,
    AngkotError,
    AuthorizationError,
    ErrorCode,
    ReportError,
    RosterError,
    StoreError,
    ValidationError,
)


def test_all_error_codes_have_user_message():
    for code in ErrorCode:
        assert code in USER_MESSAGES


def test_user_message_lookup():
    err = AngkotError("lock timeout on drivers", code=ErrorCode.STORE_UNAVAILABLE)
    assert err.user_message == "Database sedang sibuk. Silakan coba lagi sebentar."


def test_default_code_is_internal_error():
    assert AngkotError("boom").user_message == USER_MESSAGES[ErrorCode.INTERNAL_ERROR]


def test_subclasses_inherit_user_message():
    assert RosterError("x", code=ErrorCode.UNKNOWN_DRIVER).user_message == USER_MESSAGES[ErrorCode.UNKNOWN_DRIVER]
    assert RosterError("x", code=ErrorCode.DUPLICATE_KEY).user_message == USER_MESSAGES[ErrorCode.DUPLICATE_KEY]
    assert ValidationError("x", code=ErrorCode.MALFORMED_INPUT).user_message == USER_MESSAGES[ErrorCode.MALFORMED_INPUT]
    assert ReportError("x", code=ErrorCode.NO_DATA_FOR_DATE).user_message == USER_MESSAGES[ErrorCode.NO_DATA_FOR_DATE]
    assert StoreError("x", code=ErrorCode.STORE_READ_FAILED).user_message == USER_MESSAGES[ErrorCode.STORE_READ_FAILED]
    assert AuthorizationError("x", code=ErrorCode.FORBIDDEN).user_message == USER_MESSAGES[ErrorCode.FORBIDDEN]


def test_user_message_never_exposes_internal_message():
    internal = "INSERT INTO departures (driver_id) VALUES (7) failed: database is locked"
    err = StoreError(internal, code=ErrorCode.STORE_WRITE_FAILED)
    assert internal not in err.user_message
