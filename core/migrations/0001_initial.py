# Generated manually

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Website",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("url", models.URLField(max_length=2000)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "last_checked_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Set by the scraper after each successful fetch.",
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="websites",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Website",
                "verbose_name_plural": "Websites",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user"], name="website_user_idx"),
                    models.Index(fields=["is_active"], name="website_is_active_idx"),
                    models.Index(fields=["last_checked_at"], name="website_last_checked_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "url"), name="unique_website_url_per_user"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Article",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("title", models.CharField(max_length=1000)),
                ("link", models.TextField()),
                ("description", models.TextField(blank=True, null=True)),
                ("pub_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("guid", models.CharField(max_length=1000)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "website",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="articles",
                        to="core.website",
                    ),
                ),
            ],
            options={
                "verbose_name": "Article",
                "verbose_name_plural": "Articles",
                "ordering": ["-pub_date", "-id"],
                "indexes": [
                    models.Index(fields=["website"], name="article_website_idx"),
                    models.Index(
                        fields=["website", "pub_date"], name="article_website_pub_date_idx"
                    ),
                    models.Index(fields=["guid"], name="article_guid_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("website", "guid"), name="unique_article_guid_per_website"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Feed",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("feed_id", models.CharField(max_length=100, unique=True)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("link", models.URLField(max_length=2000)),
                (
                    "last_build_date",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "website",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feed",
                        to="core.website",
                    ),
                ),
            ],
            options={
                "verbose_name": "Feed",
                "verbose_name_plural": "Feeds",
                "ordering": ["feed_id"],
            },
        ),
    ]
