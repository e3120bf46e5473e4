class RecommenderError(Exception):
    """Base error; carries the HTTP status the relay answers with."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MissingFieldsError(RecommenderError):
    status_code = 400
    default_message = "Missing genre/mood/level"


class MissingCredentialError(RecommenderError):
    status_code = 500
    default_message = "Missing GEMINI_API_KEY on server"


class ProviderError(RecommenderError):
    """The provider answered with a non-success status; the status is passed through."""

    default_message = "Gemini request failed."

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(message, status_code=status_code)


class ProviderTimeoutError(ProviderError):
    default_message = "Gemini request timed out."

    def __init__(self, message: str | None = None):
        super().__init__(504, message)
