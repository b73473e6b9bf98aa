import logging

from django.conf import settings
from rest_framework import permissions

logger = logging.getLogger(__name__)


class IsRideParticipant(permissions.BasePermission):
    """
    Only the rider who asked for the ride, or the volunteer assigned to it,
    may move it along.
    """
    def has_object_permission(self, request, view, obj):
        uid = request.user.uid
        return uid in (obj.rider_id, obj.assigned_volunteer_id)


class IsSelf(permissions.BasePermission):
    # volunteer documents are keyed by the volunteer's uid
    def has_permission(self, request, view):
        return view.kwargs.get("pk") == request.user.uid


class HasEventSecret(permissions.BasePermission):
    """
    The caller must present EVENT_SHARED_SECRET in X-Event-Secret.
    Without a configured secret the endpoint is only open in DEBUG.
    """
    def has_permission(self, request, view):
        if not settings.EVENT_SHARED_SECRET:
            if not settings.DEBUG:
                logger.warning("EVENT_SHARED_SECRET is not set; rejecting ride event")
            return settings.DEBUG
        return request.headers.get("X-Event-Secret") == settings.EVENT_SHARED_SECRET
