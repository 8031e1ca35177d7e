"""
URL configuration for core app.
"""

from django.urls import path

from core import views

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    path("rss/", views.rss_feed_view, name="rss_feed_missing"),
    path("rss/<str:feed_id>", views.rss_feed_view, name="rss_feed"),
]
