"""Pytest configuration and shared fixtures."""

import os

import django
from django.test import Client

import pytest

# Configure Django settings for tests
os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE", "smart_notification_service.settings_test"
)
django.setup()


@pytest.fixture
def api_client():
    """Provide Django test client."""
    return Client()
