from fastapi import Request
from fastapi.responses import JSONResponse


class TrainerError(Exception):
    """Base class for every failure the trainer reports to its callers."""

    default_message = "Trainer error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class EmptySource(TrainerError):
    default_message = "The uploaded source contains no rows."


class NoValidWordsFound(TrainerError):
    default_message = "No valid words found. Ensure format is 'Native - Empty Column - Translation'."


class MalformedPersistedState(TrainerError):
    default_message = "Persisted state could not be parsed."


class SourceReadFailure(TrainerError):
    default_message = "Failed to read the uploaded file."


class NoDictionaryLoaded(TrainerError):
    default_message = "No dictionary is loaded."


class SetNotFound(TrainerError):
    default_message = "Set not found."


STATUS_CODES = {
    EmptySource: 400,
    NoValidWordsFound: 400,
    SourceReadFailure: 400,
    NoDictionaryLoaded: 409,
    SetNotFound: 404,
}


def handle_errors(app) -> None:
    @app.exception_handler(TrainerError)
    async def _trainer_error_handler(request: Request, exc: TrainerError):
        return JSONResponse(status_code=STATUS_CODES.get(type(exc), 500), content={"detail": exc.message})
