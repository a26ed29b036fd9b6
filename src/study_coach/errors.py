"""Exception types raised by the study coach core."""


class StudyCoachError(Exception):
    """Base class for all errors raised by study_coach."""


class ConfigurationError(StudyCoachError):
    """A required setting (usually the API key) is missing."""


class CollaboratorError(StudyCoachError):
    """The plan generator or progress analyzer failed or returned garbage."""


class NotFoundError(StudyCoachError):
    """A project, task or checkpoint id does not exist."""


class ValidationError(StudyCoachError):
    """User input violates a basic constraint."""


class InvalidRangeError(ValidationError):
    """A time range is malformed or ends before it starts."""
