from django.conf import settings
from django.core.management.base import BaseCommand

from django_q.models import Schedule

SCRAPE_SCHEDULE_NAME = "daily_website_scraping"
CLEANUP_SCHEDULE_NAME = "delete_old_articles"


class Command(BaseCommand):
    help = "Sets up periodic tasks for the application"

    def add_arguments(self, parser):
        parser.add_argument(
            "--delete",
            action="store_true",
            help="Delete existing schedules",
        )

    def handle(self, *args, **options):
        if options["delete"]:
            deleted, _ = Schedule.objects.filter(
                name__in=[SCRAPE_SCHEDULE_NAME, CLEANUP_SCHEDULE_NAME]
            ).delete()
            self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} existing schedule(s)"))
            return

        cron_schedule = settings.SITEFEED_SCRAPE_CRON
        if len(cron_schedule.split()) != 5:
            self.stderr.write(
                self.style.ERROR(
                    f"Invalid cron format: {cron_schedule}. "
                    "Expected 5 parts: minute hour day month day_of_week"
                )
            )
            return

        _, created = Schedule.objects.update_or_create(
            name=SCRAPE_SCHEDULE_NAME,
            defaults={
                "func": "core.tasks.scrape_all_websites",
                "schedule_type": Schedule.CRON,
                "cron": cron_schedule,
                "repeats": -1,  # Forever
            },
        )
        action = "Created" if created else "Updated"
        self.stdout.write(
            self.style.SUCCESS(f"{action} schedule '{SCRAPE_SCHEDULE_NAME}' with cron: {cron_schedule}")
        )

        if settings.SITEFEED_ARTICLE_RETENTION_DAYS > 0:
            _, created = Schedule.objects.update_or_create(
                name=CLEANUP_SCHEDULE_NAME,
                defaults={
                    "func": "core.tasks.delete_old_articles",
                    "schedule_type": Schedule.DAILY,
                    "repeats": -1,
                },
            )
            action = "Created" if created else "Updated"
            self.stdout.write(self.style.SUCCESS(f"{action} schedule '{CLEANUP_SCHEDULE_NAME}'"))
        else:
            Schedule.objects.filter(name=CLEANUP_SCHEDULE_NAME).delete()
