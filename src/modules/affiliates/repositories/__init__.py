"""Affiliate repositories package."""

from modules.affiliates.repositories.django_repository import AffiliateDjangoRepository
from modules.affiliates.repositories.interfaces import IAffiliateRepository

__all__ = ["IAffiliateRepository", "AffiliateDjangoRepository"]
