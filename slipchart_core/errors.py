from __future__ import annotations


class ChartInputError(ValueError):
    pass


class SchemaError(ChartInputError):
    pass


class InvalidDateError(ChartInputError):
    pass


class MissingDateError(ChartInputError):
    pass


class EmptyResultError(ChartInputError):
    pass


class DateRangeError(ChartInputError):
    """The padded timeline would run past the first or last representable date."""


class InternalInvariantError(RuntimeError):
    """A task date fell outside the computed timeline."""
