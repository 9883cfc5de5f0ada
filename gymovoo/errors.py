"""
Engine Errors
-------------
The two fatal conditions the plan engine surfaces to its callers. Minor data
noise (unknown equipment ids, unmapped injury tags) is never raised; it is
reported as `ValidationWarning` entries and warning-level log lines instead.
"""

from typing import Any, Optional


class EngineError(Exception):
    """Base class for plan engine failures."""


class InvalidProfileError(EngineError):
    """A goal/experience/location/availability value outside the recognized set.

    Callers should treat this as a defect ("contact support"), not as
    something the user can fix by changing answers.
    """

    def __init__(self, field: str, value: Any, message: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for '{field}': {value!r}")


class InsufficientCatalogError(EngineError):
    """No catalog exercise satisfies the equipment + difficulty filter.

    Fatal for the whole plan; no partial plan is returned. The user-facing
    remedy is to try different equipment or a different goal.
    """

    def __init__(self, message: str, *, day_index: Optional[int] = None) -> None:
        self.day_index = day_index
        super().__init__(message)
