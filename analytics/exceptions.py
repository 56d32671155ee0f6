class AttendanceParseError(Exception):
    """Base error for a sheet that cannot be turned into an employee-month."""

    code = "PARSE_ERROR"


class EmptyInputError(AttendanceParseError):
    """Raised when the source has no rows at all."""

    code = "EMPTY_INPUT"

    def __init__(self, message: str = "No data found in the uploaded file"):
        super().__init__(message)


class NoValidRecordsError(AttendanceParseError):
    """Raised when rows exist but none of them carries a readable date."""

    code = "NO_VALID_RECORDS"

    def __init__(self, message: str = "Could not parse any valid attendance records"):
        super().__init__(message)


class UnsupportedFileError(AttendanceParseError):
    """Raised when the reader is handed a file type it cannot open."""

    code = "UNSUPPORTED_FILE"
