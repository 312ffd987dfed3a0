"""
Domain errors raised by the service layer. Routes translate them to HTTPException.
"""


class RxTrainError(Exception):
    """Base class for domain errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RxTrainError):
    status_code = 404


class ModuleLockedError(RxTrainError):
    status_code = 403


class AnswerSelectionError(RxTrainError):
    """Malformed or missing quiz answer selection. Nothing is mutated."""

    status_code = 422


class QuizRequiredError(RxTrainError):
    status_code = 400


class ImportRowError(RxTrainError):
    """A single bulk-import row could not be applied."""
