"""Tests for RequestIDMiddleware."""

import uuid
from unittest.mock import MagicMock

from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase

from engine.logging.context import get_request_id
from engine.middleware import RequestIDMiddleware


class TestRequestIDMiddleware(SimpleTestCase):
    """Test suite for RequestIDMiddleware."""

    def setUp(self):
        """Set up test fixtures."""
        self.factory = RequestFactory()
        self.seen_request_ids = []

        def get_response(request):
            self.seen_request_ids.append(get_request_id())
            return HttpResponse("ok")

        self.middleware = RequestIDMiddleware(get_response)

    def test_uses_incoming_request_id(self):
        """An incoming X-Request-ID is propagated."""
        request = self.factory.get("/", HTTP_X_REQUEST_ID="abc-123")

        response = self.middleware(request)

        self.assertEqual(response["X-Request-ID"], "abc-123")
        self.assertEqual(request.request_id, "abc-123")
        self.assertEqual(self.seen_request_ids, ["abc-123"])

    def test_generates_request_id(self):
        """Requests without an id get a UUID4."""
        response = self.middleware(self.factory.get("/"))

        generated = response["X-Request-ID"]
        self.assertEqual(uuid.UUID(generated).version, 4)
        self.assertEqual(self.seen_request_ids, [generated])

    def test_clears_request_id_after_response(self):
        """The context variable does not outlive the request."""
        self.middleware(self.factory.get("/", HTTP_X_REQUEST_ID="abc-123"))

        self.assertIsNone(get_request_id())

    def test_clears_request_id_when_view_raises(self):
        """The context variable is cleared on errors too."""
        middleware = RequestIDMiddleware(MagicMock(side_effect=RuntimeError("boom")))

        with self.assertRaises(RuntimeError):
            middleware(self.factory.get("/", HTTP_X_REQUEST_ID="abc-123"))

        self.assertIsNone(get_request_id())
