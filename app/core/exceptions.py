"""
Domain errors raised by the tracker, store and collaborator services.

Routes translate these into HTTP responses; services never raise HTTPException.
"""


class JobGenieError(Exception):
    """Base class for all domain errors."""


class NotFoundError(JobGenieError, LookupError):
    """An application, note or reminder no longer exists locally."""


class ApplicationNotFoundError(NotFoundError):
    def __init__(self, application_id: str):
        super().__init__("Application not found")
        self.application_id = application_id


class NoteNotFoundError(NotFoundError):
    def __init__(self, note_id: str):
        super().__init__("Note not found")
        self.note_id = note_id


class ReminderNotFoundError(NotFoundError):
    def __init__(self, reminder_id: str):
        super().__init__("Reminder not found")
        self.reminder_id = reminder_id


class StoreError(JobGenieError):
    """The record store rejected or failed an operation."""


class BackupNotFoundError(NotFoundError):
    def __init__(self, key: str):
        super().__init__("No backup found")
        self.key = key


class WebhookError(JobGenieError):
    """The brand generator webhook could not be reached or answered badly."""


class GenerationError(JobGenieError):
    """The LLM provider failed to produce text."""
