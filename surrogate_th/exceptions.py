"""
Custom exceptions for the surrogate thermal-hydraulics library.
"""


class SurrogateError(Exception):
    """Base exception for all surrogate library errors."""
    pass


class ConfigurationError(SurrogateError):
    """Invalid or inconsistent configuration."""
    pass


class ConductionSolveError(SurrogateError):
    """Radial conduction solve failed for a (pin, axial) column."""

    def __init__(self, message: str, pin: int = None, axial: int = None):
        if pin is not None and axial is not None:
            message = f"{message} (pin={pin}, axial={axial})"
        super().__init__(message)
        self.pin = pin
        self.axial = axial


class SnapshotIOError(SurrogateError):
    """Visualization snapshot could not be written."""

    def __init__(self, message: str, filename: str = None):
        super().__init__(message)
        self.filename = filename
