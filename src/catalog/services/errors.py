"""Errors raised by product stores."""


class PersistenceError(Exception):
    """Raised when the persistence layer fails to read or write products."""

    @property
    def most_specific_cause(self) -> BaseException:
        """The innermost exception in the ``__cause__`` chain."""
        cause: BaseException = self
        while cause.__cause__ is not None:
            cause = cause.__cause__
        return cause
