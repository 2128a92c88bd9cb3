from django.core.management.base import BaseCommand

from modules.settlements.handlers import build_settlement_service


class Command(BaseCommand):
    help = (
        "Detect and repair disagreements between order settlement pointers "
        "and cash-out coverage."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would be repaired without writing anything.",
        )

    def handle(self, *args, **options):
        report = build_settlement_service().repair_inconsistencies(
            dry_run=options["dry_run"]
        )
        self.stdout.write(
            f"Found {report.found}, repaired {report.repaired}, "
            f"unresolved {len(report.unresolved)}."
        )
        for item in report.unresolved:
            self.stdout.write(
                self.style.WARNING(
                    f"  {item.kind}: order {item.order_id} "
                    f"/ cash-out {item.cash_out_id}"
                )
            )
        if report.unresolved:
            self.stdout.write(self.style.ERROR("Manual review required."))
        else:
            self.stdout.write(self.style.SUCCESS("Settlements are consistent."))
