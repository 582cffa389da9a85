# utils/errors.py
# CodeMentor — Error taxonomy shared by services and routes.
# Every error carries a machine-readable `code` and the HTTP status it maps to.
# Imports from: nothing.


class CodeMentorError(Exception):
    code: str = "error"
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# (a) client input
class ClientInputError(CodeMentorError):
    code = "invalid_request"


# (b) configuration
class ConfigurationError(CodeMentorError):
    code = "configuration_error"


# (c) upstream
class UpstreamError(CodeMentorError):
    """Transport failure or an unreadable body from the generation API."""
    code = "upstream_unavailable"


class UpstreamStatusError(UpstreamError):
    """The generation API answered with a non-2xx status."""
    code = "upstream_status_error"

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


class InvalidResponseFormatError(CodeMentorError):
    """The model's text could not be turned into the expected object."""
    code = "invalid_response_format"


# (d) persistence
class PersistenceError(CodeMentorError):
    code = "persistence_error"


class NotFoundError(CodeMentorError):
    code = "not_found"
    status_code = 404
