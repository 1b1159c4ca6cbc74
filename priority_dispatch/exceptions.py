"""Exceptions raised by the dispatch services."""


class PriorityDispatchError(Exception):
    """Base class for dispatch errors."""


class AssignmentStateError(PriorityDispatchError):
    """An assignment session was driven out of order."""


class PriorityChangeError(PriorityDispatchError):
    """A priority change request cannot be applied."""
