"""Cash-out repositories package."""

from modules.settlements.repositories.django_repository import CashOutDjangoRepository
from modules.settlements.repositories.interfaces import ICashOutRepository

__all__ = ["ICashOutRepository", "CashOutDjangoRepository"]
