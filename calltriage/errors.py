"""Domain exceptions mapped to HTTP responses in calltriage.main"""


class TriageError(Exception):
    """Base class for errors raised by the triage services"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(TriageError):
    """Required input missing or invalid"""

    status_code = 400


class NotFoundError(TriageError):
    """Referenced entity does not exist"""

    status_code = 404

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ConflictError(TriageError):
    """Entity with the same identifier already exists"""

    status_code = 409


class OpenMicError(TriageError):
    """OpenMic voice platform call failed or is not configured"""

    status_code = 500


class AnalysisError(Exception):
    """LLM sentiment analysis failed; always absorbed by the keyword fallback"""
