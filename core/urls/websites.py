"""Website management API URL configuration."""

from django.urls import path

from core import views

urlpatterns = [
    path("", views.website_collection, name="website_collection"),
    path("<int:website_id>/", views.website_detail, name="website_detail"),
    path("<int:website_id>/toggle/", views.website_toggle, name="website_toggle"),
    path("<int:website_id>/articles/", views.website_articles, name="website_articles"),
    path("<int:website_id>/scrape/", views.website_scrape, name="website_scrape"),
]
