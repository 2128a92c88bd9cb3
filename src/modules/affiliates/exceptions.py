"""Affiliate domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import EntityNotFound, PreconditionFailed


class AffiliateNotFound(EntityNotFound):
    """The requested affiliate does not exist."""


class AffiliateAlreadyExists(PreconditionFailed):
    """An affiliate is already registered with this phone number."""


class AffiliateNotApproved(PreconditionFailed):
    """The affiliate cannot take orders in its current status."""
