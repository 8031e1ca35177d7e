"""Project-level URL configuration."""

from typing import Any, List

from django.contrib import admin
from django.shortcuts import redirect
from django.urls import include, path, re_path


def redirect_to_admin(request, *args, **kwargs):
    return redirect("admin:index")


urlpatterns: List[Any] = [
    path("admin/", admin.site.urls),
    path("", include("core.urls")),
]

# Anything else lands on the admin, which is the management UI.
urlpatterns += [
    re_path(r"^$", redirect_to_admin),
]
