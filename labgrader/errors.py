"""
Exceptions raised while preparing, building and cleaning up a lab.
"""


class GraderError(Exception):
    """Base class for fatal grading errors."""


class SubmissionNotFoundError(GraderError, FileNotFoundError):
    """The submission archive does not exist."""


class LabNameError(GraderError, ValueError):
    """The archive name does not follow the <Student>Lab<Name>.zip convention."""


class BuildError(GraderError):
    """Extraction, template merge or the Ant build failed."""


class CleanupError(GraderError):
    """Generated directories could not be removed."""


class ReportError(GraderError):
    """The grading report could not be written."""
