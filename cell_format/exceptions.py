"""
Exception hierarchy for cell-format.

Malformed format strings never raise; these exceptions cover programmer errors
(wrong argument types) and problems in the tabular layer.
"""


class CellFormatError(Exception):
    """Base exception for all cell-format errors."""
    pass


class InvalidFormatError(CellFormatError, TypeError):
    """A format argument was neither a string nor None."""

    def __init__(self, format_string: object):
        """
        Initialize invalid format exception.

        Args:
            format_string: The offending argument
        """
        self.format_string = format_string
        super().__init__(
            f"Format string must be a str or None, got {type(format_string).__name__}"
        )


class SheetFormatError(CellFormatError, ValueError):
    """Applying formats to a sheet failed."""
    pass
