"""
Exception taxonomy for the graduation engine.

Every fatal condition raised by the engine derives from GraduationError, so
callers can fail one file and keep processing the rest of an upload.
Non-fatal conditions are not exceptions; see models.IngestionWarning.
"""


class GraduationError(Exception):
    """Base class for fatal engine errors."""


class MissingHeadersError(GraduationError):
    """A tabular file lacks one or more required columns."""

    def __init__(self, missing: list):
        self.missing = list(missing)
        super().__init__(f"Missing required headers: {', '.join(self.missing)}")


class NoReadableTextError(GraduationError):
    """Neither the structured scan nor the fallback scan recovered any text."""

    def __init__(self, message: str = "No readable text could be extracted from the document"):
        super().__init__(message)


class UnclassifiedCourseError(GraduationError):
    """A course has no usable category and defaulting was not requested."""

    def __init__(self, course_code: str, declared_type: str = None):
        self.course_code = course_code
        self.declared_type = declared_type
        if declared_type:
            message = f"Course {course_code} has unrecognized type '{declared_type}'"
        else:
            message = f"Course {course_code} is not in the course-type map"
        super().__init__(message)


class UnknownConflictError(GraduationError):
    """Resolution referenced a conflict that does not exist or was already resolved."""

    def __init__(self, conflict_id: str):
        self.conflict_id = conflict_id
        super().__init__(f"Unknown or already resolved conflict: {conflict_id}")


class InvalidResolutionError(GraduationError):
    """The chosen entry index does not exist in the conflict group."""

    def __init__(self, conflict_id: str, index: int, entry_count: int):
        self.conflict_id = conflict_id
        self.index = index
        self.entry_count = entry_count
        super().__init__(
            f"Conflict {conflict_id} has {entry_count} entries; index {index} is out of range"
        )
