"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups needed by order
intake: by phone (upsert) and by referral code (referrer resolution).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_phone(self, phone: str) -> Optional[Customer]:
        """Retrieve a customer by phone number (digits only)."""

    @abstractmethod
    def get_by_referral_code(self, code: str) -> Optional[Customer]:
        """Retrieve the oldest customer owning *code* (case-insensitive)."""
