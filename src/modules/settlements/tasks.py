"""Asynchronous settlement tasks."""

from __future__ import annotations

import structlog
from celery import shared_task

from modules.settlements.handlers import build_settlement_service

logger = structlog.get_logger(__name__)


@shared_task(name="settlements.reconcile")
def reconcile_settlements(dry_run: bool = False) -> dict:
    """Run the reconciliation sweep and return a summary."""
    report = build_settlement_service().repair_inconsistencies(dry_run=dry_run)
    return {
        "found": report.found,
        "repaired": report.repaired,
        "unresolved": [
            {
                "kind": item.kind,
                "order_id": item.order_id,
                "cash_out_id": item.cash_out_id,
            }
            for item in report.unresolved
        ],
    }
