import logging

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from backend import services
from notifications.callable import send_ride_notification
from rides.models import RideStatus, UrgencyLevel
from store.repository import RecordNotFound
from .permissions import HasEventSecret, IsRideParticipant, IsSelf
from .serializers import (
    RideRequestCreatedEventSerializer,
    RideRequestCreateSerializer,
    RideRequestSerializer,
    RideStatusUpdateSerializer,
    VolunteerAvailabilitySerializer,
)

logger = logging.getLogger(__name__)


class RideRequestViewSet(viewsets.ViewSet):
    """
    Ride requests.
    - Rider: create, read, cancel
    - Assigned volunteer: move the ride through its lifecycle
    """
    permission_classes = [permissions.IsAuthenticated, IsRideParticipant]

    def create(self, request):
        serializer = RideRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        values = serializer.validated_data

        repository = services.get_repository()
        ride_id = repository.create_ride_request(
            rider_id=request.user.uid,
            rider_name=values.get("riderName") or request.user.email,
            pickup=values["pickupLocation"],
            dropoff=values.get("dropoffLocation"),
            urgency=UrgencyLevel(values["urgency"]),
            notes=values["notes"],
        )
        ride_request = repository.get_ride_request(ride_id)
        return Response(RideRequestSerializer(ride_request).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        ride_request = self._get_ride_request(pk)
        self.check_object_permissions(request, ride_request)
        return Response(RideRequestSerializer(ride_request).data)

    @action(detail=False, methods=["get"])
    def pending(self, request):
        """
        Every ride still waiting for a volunteer.
        """
        ride_requests = services.get_repository().list_pending_requests()
        return Response(RideRequestSerializer(ride_requests, many=True).data)

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = RideStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ride_request = self._get_ride_request(pk)
        self.check_object_permissions(request, ride_request)

        # RideStateException -> 409 via the project exception handler
        ride_request = services.get_repository().update_ride_status(
            pk, RideStatus(serializer.validated_data["status"])
        )
        return Response(RideRequestSerializer(ride_request).data)

    def _get_ride_request(self, ride_id):
        ride_request = services.get_repository().get_ride_request(ride_id)
        if ride_request is None:
            raise RecordNotFound(f"Ride request {ride_id} not found")
        return ride_request


class VolunteerViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated, IsSelf]

    @action(detail=True, methods=["post"])
    def availability(self, request, pk=None):
        serializer = VolunteerAvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        is_available = serializer.validated_data["isAvailable"]
        services.get_repository().update_volunteer_availability(pk, is_available)
        return Response({"id": pk, "isAvailable": is_available})


class RideRequestCreatedView(APIView):
    """
    Called once per created rideRequests document. Always answers 200 with
    the match outcome so the delivery service does not retry a failed match.
    """
    permission_classes = [HasEventSecret]
    authentication_classes = []

    def post(self, request):
        serializer = RideRequestCreatedEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = services.get_dispatcher().handle_ride_request_created(
            serializer.validated_data["rideId"],
            serializer.validated_data["data"],
        )
        return Response(outcome.to_dict())


class SendRideNotificationView(APIView):
    """
    The sendRideNotification callable: {token, title, body, data}.
    """

    def post(self, request):
        result = send_ride_notification(request.data, services.get_push_client())
        return Response(result)
