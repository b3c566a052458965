"""Exceptions raised by the measurement engine.

Recoverable interaction conditions (clicks while inactive, out-of-range
removal, degenerate snap) are no-ops and never raise. Only wiring mistakes
made by the host application end up here.
"""


class MeasurementError(Exception):
    """Base class for measurement engine errors."""


class SessionNotInitializedError(MeasurementError, RuntimeError):
    """Session used before init(scene, camera) was called."""


class SessionDisposedError(MeasurementError, RuntimeError):
    """Session used after dispose(); its shared materials are gone."""
