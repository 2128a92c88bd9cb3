"""Customer service layer (Use Cases).

Customers are registered implicitly: every order upserts the buyer by
phone number, refreshing the name and address they typed last.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.customers.exceptions import InvalidCustomerPhone
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def register_or_update(self, name: str, phone: str, address: str = "") -> Customer:
        """Create the customer for *phone* or refresh its name/address.

        Raises:
            InvalidCustomerPhone: *phone* contains no digits.
        """
        if not Customer.sanitize_phone(phone):
            raise InvalidCustomerPhone("Phone number must contain digits.")

        customer = self._repo.get_by_phone(phone)
        if customer is None:
            customer = Customer(name=name, phone=phone, address=address)
        else:
            customer.name = name
            if address:
                customer.address = address
        customer = self._repo.save(customer)
        logger.info("customer.registered", customer_id=str(customer.id))
        return customer

    def find_referrer(self, code: Optional[str]) -> Optional[Customer]:
        """Resolve a referral code to its owner, or ``None``."""
        if not code or not code.strip():
            return None
        return self._repo.get_by_referral_code(code)
