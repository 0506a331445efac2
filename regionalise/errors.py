# regionalise/errors.py


class ParseError(ValueError):
    """Raised when a numeral string cannot be turned into a number."""


class UnsupportedUnitError(ValueError):
    def __init__(self, unit: str):
        super().__init__(f"Unsupported unit: {unit!r}")
        self.unit = unit


class UnsupportedWordError(ValueError):
    def __init__(self, word: str):
        super().__init__(f"No contextual rules for word: {word!r}")
        self.word = word


class ConfigValidationError(ValueError):
    """
    Raised when a configuration mapping fails validation.

    `errors` holds one human-readable message per failing field.
    """

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = list(errors or [])
