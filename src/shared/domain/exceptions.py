"""Cross-module error taxonomy.

Every module's ``exceptions.py`` subclasses one of these so the API
layer can translate any domain failure into an HTTP status without
knowing the module that raised it.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all business-rule violations."""


class EntityNotFound(DomainError):
    """The referenced entity does not exist."""


class InvalidTransition(DomainError):
    """A state change was attempted from a state that does not permit it.

    No mutation is applied when this is raised.
    """


class PreconditionFailed(DomainError):
    """The command's precondition does not hold; the operation is refused."""


class PartialCommitRisk(DomainError):
    """Settlement pointers and cash-out coverage disagree."""
