"""Domain exceptions, each mapped to the HTTP status it surfaces as."""


class WeblistError(Exception):
    """
    Base exception for all weblist request failures.
    """

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class PathNotFoundError(WeblistError):
    """
    Raised when a path does not exist under the served root.

    Traversal attempts land here too: a cleaned path that escaped
    nothing simply does not exist inside the root.
    """

    status_code = 404


class AccessDeniedError(WeblistError):
    """
    Raised when a path matches an exclusion pattern, or a feature is disabled.
    """

    status_code = 403


class BadRequestError(WeblistError):
    """
    Raised for semantically invalid requests (viewing a directory, bad form).
    """

    status_code = 400


class ConflictError(WeblistError):
    """
    Raised when an upload would replace an existing file.
    """

    status_code = 409


class PayloadTooLargeError(WeblistError):
    """
    Raised when an upload body exceeds the configured limit.
    """

    status_code = 413


class RateLimitedError(WeblistError):
    """
    Raised when a source address exhausted its login attempts.
    """

    status_code = 429
