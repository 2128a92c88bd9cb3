"""Customer model (buyers identified by phone number).

Business rules implemented:
- A customer is unique per phone number.
- Every customer owns a referral code derived from name and phone that
  new customers can quote on their first order.
- Phone numbers are masked in ``__str__`` and logs.
"""

from __future__ import annotations

import re

from django.db import models

from modules.core.models import BaseModel

REFERRAL_NAME_PREFIX_LENGTH = 4
REFERRAL_PHONE_SUFFIX_LENGTH = 4


class Customer(BaseModel):
    """Customer aggregate root.

    ``phone`` stores only digits (sanitised on save).  ``referral_code`` is
    not unique: two customers with the same first-name prefix and phone
    suffix share a code, and the oldest one is the referrer.
    """

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, unique=True)
    address = models.TextField(blank=True, default="")
    referral_code = models.CharField(max_length=16, db_index=True, editable=False)

    class Meta:
        db_table = "customers"
        ordering = ["created_at"]

    # ------------------------------------------------------------------
    # Sanitisation
    # ------------------------------------------------------------------

    @staticmethod
    def sanitize_phone(value: str) -> str:
        """Strip all non-digit characters from a phone number."""
        return re.sub(r"\D", "", value or "")

    @staticmethod
    def generate_referral_code(name: str, phone: str) -> str:
        """``JUAN1234``: first name (4 chars, upper) + last 4 phone digits."""
        first_name = name.strip().split(" ")[0] if name.strip() else ""
        name_part = first_name[:REFERRAL_NAME_PREFIX_LENGTH].upper()
        phone_part = Customer.sanitize_phone(phone)[-REFERRAL_PHONE_SUFFIX_LENGTH:]
        return f"{name_part}{phone_part}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        self.phone = self.sanitize_phone(self.phone)
        self.referral_code = self.generate_referral_code(self.name, self.phone)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "referral_code" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["referral_code"]
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display (mask sensitive data)
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        suffix = self.phone[-4:] if self.phone else "????"
        return f"{self.name} (***{suffix})"
