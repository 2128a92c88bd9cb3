"""Inventory change domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import EntityNotFound, InvalidTransition


class InventoryChangeNotFound(EntityNotFound):
    """The requested inventory change does not exist."""


class InvalidInventoryChangeStatus(InvalidTransition):
    """The change's current status does not allow the requested step."""
