"""Django command to scrape websites on demand."""

from django.core.management.base import BaseCommand, CommandError

from core.services import ScraperService


class Command(BaseCommand):
    help = "Scrape a specific website or all active websites"

    def add_arguments(self, parser):
        parser.add_argument("--website-id", type=int, help="Scrape a specific website ID")
        parser.add_argument("--all", action="store_true", help="Scrape all active websites")
        parser.add_argument(
            "--queue",
            action="store_true",
            help="With --all, queue one django-q task per website instead of running inline",
        )

    def handle(self, *args, **options):
        website_id = options.get("website_id")
        scrape_all = options.get("all")

        if not website_id and not scrape_all:
            raise CommandError("You must specify one of: --website-id or --all")

        if website_id and scrape_all:
            raise CommandError("You can only specify one of: --website-id or --all")

        scraper = ScraperService()

        if website_id:
            self.stdout.write(self.style.SUCCESS(f"Scraping website ID: {website_id}"))
            self._print_result(scraper.scrape_website_safe(website_id))
            return

        sync = not options.get("queue")
        self.stdout.write(self.style.SUCCESS("Scraping all active websites"))
        for result in scraper.scrape_all_active(sync=sync):
            if sync:
                self._print_result(result)
            else:
                self.stdout.write(
                    f"Queued website {result['website_id']} ({result['url']}): {result['task_id']}"
                )

    def _print_result(self, result):
        """Print scrape result."""
        label = result.get("url") or f"ID {result['website_id']}"
        if result["success"]:
            self.stdout.write(
                self.style.SUCCESS(f"✓ Website {label} - {result['articles_found']} articles")
            )
        else:
            self.stdout.write(
                self.style.ERROR(f"✗ Website {label} - Error: {result.get('error', 'Unknown error')}")
            )
