"""
Custom exception hierarchy for fpga-pinout.

Callers can catch specific exceptions (e.g., SpreadsheetError vs
ConfigValidationError) instead of generic ValueError/RuntimeError.
Import problems caused by the *content* of a pin file never escape
``import_pins()``: they are turned into an unsuccessful ``ImportResult``.
"""


class PinoutError(Exception):
    """Base exception for all fpga-pinout errors."""


class UnknownFormatError(PinoutError):
    """Raised when no dialect definition is available to classify input.

    Typically means the ``dialects/`` directory is empty or every YAML
    file in it failed to load.
    """


class RowRejectedError(PinoutError):
    """Raised by the pin builder when a single data row cannot become a Pin.

    Always caught by the extraction strategy, which records a soft
    warning and moves on to the next line.
    """


class SpreadsheetError(PinoutError):
    """Raised when a binary spreadsheet container cannot be read.

    For example, a truncated ``.xlsx`` archive or a workbook with no
    sheets.
    """


class ConfigValidationError(PinoutError):
    """Raised when pinout.yaml fails validation.

    This can happen if:
    - The file is empty.
    - A scan limit or tile spacing in the file is not a positive integer.

    Building the settings models directly raises
    ``pydantic.ValidationError`` instead.
    """


class RuleTableError(PinoutError):
    """Raised when a validation rule table YAML file is malformed."""


class ImportFailedError(PinoutError):
    """Raised by ``open()`` / ``Pinout`` when an import yields no pins.

    The message carries the errors collected in the ``ImportResult``.
    """
