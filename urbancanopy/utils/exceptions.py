# -*- coding: utf-8 -*-
"""Exceptions raised by the urbancanopy analysis functions.

Every error is fatal for the batch: callers are expected to let these
propagate, the command line turns them into a logged message and a non-zero
exit status.
"""


class CanopyAnalysisError(Exception):
    """Base exception for all urbancanopy errors."""

    pass


class MissingColumnsError(CanopyAnalysisError, KeyError):
    """Raised when a table lacks one or more required columns."""

    def __init__(self, missing, table: str = "table"):
        self.missing = list(missing)
        self.table = table
        super().__init__(
            f"{table} is missing required column(s): {', '.join(map(str, self.missing))}"
        )

    def __str__(self):
        # KeyError would otherwise wrap the message in quotes
        return self.args[0]


class CRSMismatchError(CanopyAnalysisError, ValueError):
    """Raised when spatial layers are missing a CRS, use different CRSs, or
    use a geographic CRS where planar areas are needed."""

    pass


class InvalidMeasurementError(CanopyAnalysisError, ValueError):
    """Raised when a measurement column holds impossible values."""

    def __init__(self, column: str, count: int, reason: str = ""):
        self.column = column
        self.count = count
        self.reason = reason
        message = f"{count} invalid value(s) in column '{column}'"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InputFileError(CanopyAnalysisError):
    """Raised when an input table or layer cannot be read."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = str(reason)
        super().__init__(f"Could not read {self.path}: {self.reason}")
