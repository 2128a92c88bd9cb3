"""Settlement domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import (
    EntityNotFound,
    InvalidTransition,
    PreconditionFailed,
)


class CashOutNotFound(EntityNotFound):
    """The requested cash-out does not exist."""


class NothingToSettle(PreconditionFailed):
    """The affiliate has no finished, unsettled orders."""


class ProofOfPaymentRequired(PreconditionFailed):
    """A negative balance cash-out needs a proof-of-payment attachment."""


class AffiliateNotSettleable(PreconditionFailed):
    """The affiliate's status does not allow cash-outs."""


class InvalidCashOutStatus(InvalidTransition):
    """The cash-out is not awaiting affiliate confirmation."""
