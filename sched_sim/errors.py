"""
Error kinds raised by the loader, the schedulers and the CLI.

All of them derive from ValueError so callers that only care about bad
input can keep catching that.
"""


class SchedulerError(ValueError):
    """Base class for every unrecoverable simulator error."""


class InvalidArguments(SchedulerError):
    pass


class FileAccessError(SchedulerError):
    pass


class MalformedRecord(SchedulerError):
    pass


class InvalidProcessId(SchedulerError):
    pass


class DegenerateInput(SchedulerError):
    pass
