from __future__ import annotations


class KramError(Exception):
    """Base class for errors raised by kram."""


class InitError(KramError):
    """Cluster access could not be set up; nothing has been fetched yet."""


class FetchError(KramError):
    """A single listing or metrics call failed.

    These never stop a run. They are collected and printed after the table.
    """

    def __init__(self, operation: str, target: str, reason: str):
        self.operation = operation
        self.target = target
        self.reason = reason
        super().__init__(f'{operation} {target}: {reason}')
