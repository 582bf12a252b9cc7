class Error(Exception):
    """Base class for other exceptions"""

    pass


class SerializationError(Error):
    """Raised when a request body cannot be converted to the requested content type."""

    pass


class PathSyntaxError(Error):
    """Raised for a JSON/XML path expression that cannot be parsed."""

    pass


class AssertionMismatch(AssertionError):
    """Expected and actual values differ."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Expected [{}] but found [{}]".format(expected, actual)
        )


class ActionFailedError(AssertionError):
    """Raised by the report manager when failed actions were recorded."""

    def __init__(self, failures):
        self.failures = list(failures)
        super().__init__(
            "{} action(s) failed:\n{}".format(
                len(self.failures), "\n".join(self.failures)
            )
        )
