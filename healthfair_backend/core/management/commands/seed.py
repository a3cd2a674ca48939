"""
HealthFair seed command: reproducible demo data.

Usage:
    python manage.py seed           # seed all apps
    python manage.py seed --flush   # delete fair data and seed users first

Superusers are never deleted; other users only when their e-mail ends in
'@seed.local'.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from healthfair_backend.core.cache import reference_cache
from healthfair_backend.core.seeders import seed_core
from healthfair_backend.events.seeders import seed_events
from healthfair_backend.patients.seeders import flush_patients, seed_patients


class Command(BaseCommand):
    help = "Seed database with demo data for a HealthFair event"

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete patients, visits, queue entries, events and reference data before seeding.",
        )

    def handle(self, *args, **options):
        flush = options.get("flush", False)

        self.stdout.write("=" * 80)
        self.stdout.write("  HealthFair seed")
        self.stdout.write("=" * 80)

        try:
            with transaction.atomic():
                stats = {}

                if flush:
                    self.stdout.write("\nFlushing patients, visits and queue entries...")
                    flush_patients()

                self.stdout.write("\n[1/3] Seeding Core (Roles, Users)...")
                core_stats = seed_core(flush=flush)
                stats.update(core_stats)
                self._print_stats(core_stats)

                self.stdout.write("\n[2/3] Seeding Events (Location, Services, Staff, Event)...")
                events_stats = seed_events(flush=flush)
                stats.update(events_stats)
                self._print_stats(events_stats)

                self.stdout.write("\n[3/3] Seeding Patients (Registrations, Queue)...")
                patients_stats = seed_patients()
                stats.update(patients_stats)
                self._print_stats(patients_stats)

        except Exception as e:
            self.stderr.write(f"\nSeeding failed: {e}")
            raise

        reference_cache.clear()

        self.stdout.write("\n" + "=" * 80)
        self.stdout.write(self.style.SUCCESS("  Seeding completed"))
        self.stdout.write("=" * 80)
        self._print_summary(stats)

    def _print_stats(self, stats):
        for key, value in stats.items():
            self.stdout.write(f"  - {key}: {value}")

    def _print_summary(self, stats):
        self.stdout.write("\nRecords (total):")
        for key, value in sorted(stats.items()):
            self.stdout.write(f"  - {key}: {value}")
