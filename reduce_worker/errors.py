"""
Reduce task errors
Fatal errors abort the task and are surfaced to the caller; DecodeError is
caught per line by the reader and never stops the task.
"""


class ReduceTaskError(Exception):
    """Base class for all reduce task failures"""


class MissingInputError(ReduceTaskError):
    """An expected intermediate file could not be opened"""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        message = f"cannot read intermediate file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IntermediateReadError(ReduceTaskError):
    """An intermediate file was opened but reading it failed"""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        super().__init__(f"error while reading intermediate file {path}: {reason}")


class DecodeError(ReduceTaskError):
    """A line is not a valid KeyValue record"""


class ReduceFunctionError(ReduceTaskError):
    """The reduce function raised or returned something other than a string"""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"reduce function failed for key {key!r}: {reason}")


class OutputCreateError(ReduceTaskError):
    """The output file could not be created"""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        super().__init__(f"cannot create output file: {path} ({reason})")


class FlushError(ReduceTaskError):
    """Writing, flushing or syncing the output file failed"""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        super().__init__(f"cannot write output file: {path} ({reason})")
