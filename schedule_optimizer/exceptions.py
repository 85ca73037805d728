class ScheduleOptimizerError(Exception):
    """Base exception for the schedule optimizer"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class InvalidInputError(ScheduleOptimizerError, ValueError):
    """Malformed value handed to the optimizer by the integration layer"""

    def __init__(self, message: str, field: str | None = None):
        if field:
            message = f"Invalid value for field '{field}': {message}"
        self.field = field
        super().__init__(message, "INVALID_INPUT")


class ParseError(ScheduleOptimizerError):
    """Request text the parser cannot work with at all"""

    def __init__(self, message: str = "Nothing to parse"):
        super().__init__(message, "PARSE_ERROR")
