import json

from django.core.management.base import BaseCommand, CommandError

from modules.core.snapshot import SnapshotImporter, UnsupportedSnapshotVersion


class Command(BaseCommand):
    help = "Import a JSON backup exported by the legacy storefront."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the snapshot JSON file.")

    def handle(self, *args, **options):
        try:
            with open(options["path"], encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise CommandError(f"Cannot read snapshot: {exc}") from exc
        if not isinstance(data, dict):
            raise CommandError("Snapshot must be a JSON object.")

        try:
            report = SnapshotImporter().load(data)
        except UnsupportedSnapshotVersion as exc:
            raise CommandError(str(exc)) from exc

        for collection, count in sorted(report.created.items()):
            self.stdout.write(f"  {collection}: {count} imported")
        for collection, count in sorted(report.skipped.items()):
            self.stdout.write(
                self.style.WARNING(f"  {collection}: {count} skipped")
            )
        self.stdout.write(self.style.SUCCESS("Snapshot imported."))
