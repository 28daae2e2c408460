"""URL routing configuration for the engine application."""

from django.urls import path

from .views import (
    EngineRefreshView,
    LivenessCheckView,
    NotificationAcknowledgeView,
    NotificationDetailView,
    ReadinessCheckView,
    SmartNotificationView,
    UserNotificationListView,
    UserProfileView,
)

urlpatterns = [
    # Health check endpoints
    path("health/live", LivenessCheckView.as_view(), name="health-live"),
    path("health/ready", ReadinessCheckView.as_view(), name="health-ready"),
    # Notification endpoints
    path(
        "notifications",
        SmartNotificationView.as_view(),
        name="smart-notification-create",
    ),
    path(
        "notifications/<str:notification_id>",
        NotificationDetailView.as_view(),
        name="smart-notification-detail",
    ),
    path(
        "notifications/<str:notification_id>/acknowledge",
        NotificationAcknowledgeView.as_view(),
        name="smart-notification-acknowledge",
    ),
    # Engine endpoints
    path(
        "users/<str:user_id>/profile",
        UserProfileView.as_view(),
        name="user-behavior-profile",
    ),
    path(
        "users/<str:user_id>/notifications",
        UserNotificationListView.as_view(),
        name="user-notification-list",
    ),
    path("engine/refresh", EngineRefreshView.as_view(), name="engine-refresh"),
]
