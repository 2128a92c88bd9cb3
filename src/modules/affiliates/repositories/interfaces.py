"""Affiliate repository interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.affiliates.models import Affiliate  # noqa: F401


class IAffiliateRepository(IRepository["Affiliate"]):
    """Repository contract for the Affiliate aggregate.

    ``get_for_update`` must be used before any inventory mutation so the
    stock counter is read fresh and under lock.
    """
