"""Component tests for the notification endpoints.

Requests go through URL routing, middleware, the views and the engine with
an in-memory database. Email and SMS use recording transports.
"""

import uuid
from datetime import timedelta

from django.test import Client
from django.utils import timezone

from engine.enums import NotificationStatusEnum
from engine.models import Notification
from tests.base import BaseComponentTest
from tests.factories import create_notification, notification_payload

BASE_URL = "/api/v1/smart-notifications"


class TestSmartNotificationEndpoint(BaseComponentTest):
    """Component tests for POST /notifications."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        self.client = Client()

    def _post(self, payload):
        return self.client.post(
            f"{BASE_URL}/notifications", data=payload, content_type="application/json"
        )

    def test_critical_notification_is_delivered(self):
        """A critical notification is delivered in-app and by email."""
        payload = notification_payload(
            type="security_alert",
            priority="critical",
            recipientEmail="ana@example.com",
            context={},
        )

        response = self._post(payload)

        self.assertEqual(response.status_code, 202)
        data = response.json()
        self.assertEqual(data["recipient_user_id"], payload["recipientUserId"])
        self.assertEqual(data["notification_type"], "security_alert")
        self.assertEqual(data["priority_level"], "critical")
        self.assertEqual(data["status"], "sent")
        self.assertEqual(data["delivery_channels"], ["in_app", "email"])
        self.assertTrue(data["ai_processed"])
        self.assertEqual(data["ai_metadata"]["deliveryReason"], "critical_priority")
        self.assertTrue(data["delivery_results"]["email"]["success"])
        self.assertEqual(len(self.email_transport.delivered), 1)
        self.assertTrue(
            Notification.objects.filter(notification_id=data["notification_id"]).exists()
        )

    def test_modelled_notification_is_scored(self):
        """Types with a priority model return their factor breakdown."""
        response = self._post(
            notification_payload(
                type="compliance_alert",
                context={"riskLevel": "critical", "regulatoryImpact": "high"},
            )
        )

        self.assertEqual(response.status_code, 202)
        data = response.json()
        self.assertEqual(data["priority_level"], "critical")
        self.assertEqual(data["priority_score"], 100)
        factors = [item["factor"] for item in data["ai_metadata"]["priorityFactors"]]
        self.assertEqual(factors, ["riskLevel", "regulatoryImpact"])

    def test_missing_fields_return_400(self):
        """Invalid payloads are rejected with field errors."""
        payload = notification_payload()
        del payload["title"]

        response = self._post(payload)

        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertEqual(data["error"], "bad_request")
        self.assertEqual(data["errors"][0]["loc"], ["title"])
        self.assertFalse(Notification.objects.exists())

    def test_invalid_priority_hint_returns_400(self):
        """Unknown priority hints are rejected."""
        response = self._post(notification_payload(priority="urgent"))

        self.assertEqual(response.status_code, 400)

    def test_response_carries_request_id(self):
        """The request id is echoed on the response."""
        response = self.client.post(
            f"{BASE_URL}/notifications",
            data=notification_payload(type="security_alert", priority="critical"),
            content_type="application/json",
            HTTP_X_REQUEST_ID="trace-1",
        )

        self.assertEqual(response["X-Request-ID"], "trace-1")

    def test_degraded_engine_still_accepts_notifications(self):
        """When state cannot load the request falls back to basic delivery."""
        self.engine.state.load_attempted = True

        response = self._post(notification_payload(priority="high"))

        self.assertEqual(response.status_code, 202)
        data = response.json()
        self.assertFalse(data["ai_processed"])
        self.assertEqual(data["ai_metadata"]["deliveryReason"], "basic_fallback")
        self.assertEqual(data["delivery_channels"], ["in_app"])


class TestNotificationDetailEndpoint(BaseComponentTest):
    """Component tests for GET /notifications/<id>."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        self.client = Client()

    def test_get_notification(self):
        """A stored notification is returned."""
        notification = create_notification(
            status=NotificationStatusEnum.SENT.value, sent_at=timezone.now()
        )

        response = self.client.get(
            f"{BASE_URL}/notifications/{notification.notification_id}"
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["notification_id"], str(notification.notification_id))
        self.assertEqual(data["title"], notification.title)
        self.assertEqual(data["status"], "sent")

    def test_unknown_notification_returns_404(self):
        """Unknown ids return 404."""
        response = self.client.get(f"{BASE_URL}/notifications/{uuid.uuid4()}")

        self.assertEqual(response.status_code, 404)
        self.assertIn("not found", response.json()["message"])

    def test_malformed_id_returns_404(self):
        """Ids that are not UUIDs return 404."""
        response = self.client.get(f"{BASE_URL}/notifications/not-a-uuid")

        self.assertEqual(response.status_code, 404)


class TestNotificationAcknowledgeEndpoint(BaseComponentTest):
    """Component tests for POST /notifications/<id>/acknowledge."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        self.client = Client()
        self.notification = create_notification(
            status=NotificationStatusEnum.SENT.value, sent_at=timezone.now()
        )
        self.url = f"{BASE_URL}/notifications/{self.notification.notification_id}/acknowledge"

    def test_click_marks_read_and_clicked(self):
        """A click records both read and click times."""
        response = self.client.post(
            self.url, data={"event": "clicked"}, content_type="application/json"
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertIsNotNone(data["read_at"])
        self.assertIsNotNone(data["clicked_at"])

    def test_explicit_occurred_at(self):
        """Clients can report when the event happened."""
        occurred_at = timezone.now() - timedelta(minutes=20)

        self.client.post(
            self.url,
            data={"event": "read", "occurredAt": occurred_at.isoformat()},
            content_type="application/json",
        )

        self.notification.refresh_from_db()
        self.assertEqual(self.notification.read_at, occurred_at)

    def test_unknown_event_returns_400(self):
        """Only read, clicked and dismissed are accepted."""
        response = self.client.post(
            self.url, data={"event": "liked"}, content_type="application/json"
        )

        self.assertEqual(response.status_code, 400)

    def test_unknown_notification_returns_404(self):
        """Acknowledging an unknown notification returns 404."""
        response = self.client.post(
            f"{BASE_URL}/notifications/{uuid.uuid4()}/acknowledge",
            data={"event": "read"},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 404)
