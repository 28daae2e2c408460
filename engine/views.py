"""API views for the smart notification engine."""

import structlog
from asgiref.sync import async_to_sync
from pydantic import ValidationError
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from engine.schemas.notification import (
    AcknowledgementRequest,
    NotificationDetail,
    SmartNotificationRequest,
)
from engine.services import ensure_engine_ready, get_engine, health_service

logger = structlog.get_logger(__name__)


def _validation_error_response(e: ValidationError) -> Response:
    return Response(
        {
            "error": "bad_request",
            "message": "Invalid request parameters",
            "errors": e.errors(include_url=False, include_context=False),
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class PublicAPIView(APIView):
    """Base view without authentication.

    Authentication and authorization are handled by the gateway in front of
    this service.
    """

    authentication_classes = ()
    permission_classes = (AllowAny,)


class LivenessCheckView(PublicAPIView):
    """Liveness check; never touches dependencies."""

    def get(self, _request):
        """Return 200 while the process is running."""
        liveness = health_service.get_liveness_status()
        return Response(liveness.model_dump(mode="json"), status=status.HTTP_200_OK)


class ReadinessCheckView(PublicAPIView):
    """Readiness check.

    Returns 200 with a degraded status when the database, the queue or the
    engine state is unavailable, since the engine can still send basic
    notifications.
    """

    def get(self, _request):
        """Return readiness with per-dependency health."""
        readiness = health_service.get_readiness_status(get_engine().state)
        return Response(readiness.model_dump(mode="json"), status=status.HTTP_200_OK)


class SmartNotificationView(PublicAPIView):
    """Submit a notification to the engine."""

    def post(self, request):
        """Score, schedule and deliver a notification.

        Returns:
            202 Accepted with the stored notification
            400 Bad Request if validation fails
        """
        try:
            notification_request = SmartNotificationRequest(**request.data)
        except ValidationError as e:
            logger.warning(
                "invalid_notification_request", validation_errors=e.errors()
            )
            return _validation_error_response(e)

        logger.info(
            "notification_request_received",
            user_id=notification_request.recipient_user_id,
            notification_type=notification_request.notification_type,
        )

        engine = async_to_sync(ensure_engine_ready)()
        notification = async_to_sync(engine.send_smart_notification)(
            notification_request
        )

        detail = NotificationDetail.model_validate(notification)
        return Response(detail.model_dump(mode="json"), status=status.HTTP_202_ACCEPTED)


class NotificationDetailView(PublicAPIView):
    """Retrieve a stored notification."""

    def get(self, _request, notification_id):
        """Return the notification, or 404 if it does not exist."""
        notification = async_to_sync(get_engine().store.get)(notification_id)
        detail = NotificationDetail.model_validate(notification)
        return Response(detail.model_dump(mode="json"), status=status.HTTP_200_OK)


class NotificationAcknowledgeView(PublicAPIView):
    """Record read, click and dismiss feedback for a notification."""

    def post(self, request, notification_id):
        """Record the event and return the updated notification."""
        try:
            acknowledgement = AcknowledgementRequest(**request.data)
        except ValidationError as e:
            return _validation_error_response(e)

        notification = async_to_sync(get_engine().store.acknowledge)(
            notification_id,
            acknowledgement.event,
            acknowledgement.occurred_at,
        )
        detail = NotificationDetail.model_validate(notification)
        return Response(detail.model_dump(mode="json"), status=status.HTTP_200_OK)


class UserProfileView(PublicAPIView):
    """Expose a user's behaviour profile as the engine sees it."""

    def get(self, _request, user_id):
        """Return the profile, or 404 if the user has no history."""
        engine = async_to_sync(ensure_engine_ready)()
        profile = engine.state.profiles.get(user_id)
        if profile is None:
            return Response(
                {
                    "error": "not_found",
                    "message": f"No behaviour profile for user {user_id}",
                },
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(profile.model_dump(mode="json"), status=status.HTTP_200_OK)


class EngineRefreshView(PublicAPIView):
    """Reload engine state from notification history."""

    def post(self, _request):
        """Reload state; failures surface as 503 through the exception handler."""
        state = get_engine().state
        async_to_sync(state.refresh)()
        return Response(
            health_service.check_engine_state(state).model_dump(mode="json"),
            status=status.HTTP_200_OK,
        )


class UserNotificationListView(PublicAPIView):
    """List a user's most recent notifications."""

    max_limit = 100

    def get(self, request, user_id):
        """Return notifications newest first.

        Query parameters:
        - limit: Number of notifications (default: 50, max: 100)
        """
        try:
            limit = int(request.query_params.get("limit", 50))
        except ValueError:
            limit = 0
        if not 1 <= limit <= self.max_limit:
            return Response(
                {
                    "error": "bad_request",
                    "message": "Invalid limit",
                    "detail": f"limit must be between 1 and {self.max_limit}",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        notifications = async_to_sync(get_engine().store.list_for_user)(user_id, limit)
        return Response(
            {
                "user_id": user_id,
                "count": len(notifications),
                "notifications": [
                    NotificationDetail.model_validate(n).model_dump(mode="json")
                    for n in notifications
                ],
            },
            status=status.HTTP_200_OK,
        )
