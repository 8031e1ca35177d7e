"""Core application URL configuration."""

from django.urls import include, path

from .default import urlpatterns as default_urlpatterns
from .websites import urlpatterns as website_urlpatterns

urlpatterns = default_urlpatterns + [
    path("api/websites/", include(website_urlpatterns)),
]
