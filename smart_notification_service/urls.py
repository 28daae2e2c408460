"""URL configuration for the smart notification service."""

from django.urls import include, path

urlpatterns = [
    path("api/v1/smart-notifications/", include("engine.urls")),
]
