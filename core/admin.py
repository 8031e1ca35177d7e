"""Admin configuration for the application."""

from django.contrib import admin, messages

from djangoql.admin import DjangoQLSearchMixin
from import_export.admin import ImportExportModelAdmin

from .models import Article, Feed, Website
from .services import ScraperService, WebsiteService

# Customize Admin Site
admin.site.site_header = "SiteFeed"
admin.site.site_title = "SiteFeed Admin"
admin.site.index_title = "Website feeds"

FEED_METADATA_FIELDS = {"url", "title", "description"}


@admin.register(Website)
class WebsiteAdmin(ImportExportModelAdmin, DjangoQLSearchMixin):
    """Admin configuration for Website model."""

    list_display = ["title", "url", "user", "is_active", "last_checked_at", "created_at"]
    list_filter = ["is_active", "user", "last_checked_at"]
    search_fields = ["title", "url", "user__username"]
    readonly_fields = ["last_checked_at", "created_at", "updated_at"]
    actions = ["scrape_selected_websites", "toggle_selected_websites"]
    list_select_related = ["user"]

    fieldsets = (
        (None, {"fields": ("title", "url", "description", "user", "is_active")}),
        ("Scraping", {"fields": ("last_checked_at",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def save_model(self, request, obj, form, change):
        """Refresh the feed when the website's metadata was edited."""
        super().save_model(request, obj, form, change)
        if not change or FEED_METADATA_FIELDS & set(form.changed_data):
            WebsiteService.sync_feed(obj)

    @admin.action(description="Scrape selected websites")
    def scrape_selected_websites(self, request, queryset):
        """Admin action to scrape selected websites directly."""
        scraper = ScraperService()
        total = queryset.count()
        successful = 0
        total_articles = 0

        for website in queryset:
            result = scraper.scrape_website_safe(website.id)
            if result["success"]:
                successful += 1
                total_articles += result["articles_found"]
                self.message_user(
                    request,
                    f"✓ Detected {result['articles_found']} articles on '{website.title}'",
                    messages.SUCCESS,
                )
            else:
                self.message_user(
                    request,
                    f"✗ Failed to scrape '{website.title}': {result['error']}",
                    messages.ERROR,
                )

        if successful > 0:
            self.message_user(
                request,
                f"Scrape complete: {successful}/{total} websites successful, "
                f"{total_articles} articles",
                messages.SUCCESS if successful == total else messages.WARNING,
            )

    @admin.action(description="Pause or resume selected websites")
    def toggle_selected_websites(self, request, queryset):
        count = 0
        for website in queryset:
            website.is_active = not website.is_active
            website.save(update_fields=["is_active", "updated_at"])
            count += 1
        self.message_user(request, f"Toggled {count} websites.", messages.SUCCESS)


@admin.register(Article)
class ArticleAdmin(ImportExportModelAdmin, DjangoQLSearchMixin):
    """Admin configuration for Article model."""

    list_display = ["title", "website", "pub_date", "guid", "updated_at"]
    list_filter = ["website", "pub_date"]
    search_fields = ["title", "link", "guid", "description"]
    readonly_fields = ["created_at", "updated_at"]
    list_select_related = ["website"]

    fieldsets = (
        (None, {"fields": ("title", "link", "guid", "website")}),
        ("Content", {"fields": ("description", "pub_date")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )


@admin.register(Feed)
class FeedAdmin(DjangoQLSearchMixin, admin.ModelAdmin):
    """Feeds are derived from websites, so they are read-only here."""

    list_display = ["feed_id", "title", "website", "last_build_date"]
    search_fields = ["feed_id", "title", "website__url"]
    readonly_fields = ["feed_id", "website", "title", "description", "link", "last_build_date"]
    list_select_related = ["website"]

    def has_add_permission(self, request):
        return False
