from rest_framework import serializers

from rides.models import Location, RideStatus, UrgencyLevel


class LocationSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)

    def to_internal_value(self, data):
        values = super().to_internal_value(data)
        return Location(values["latitude"], values["longitude"])


class RideRequestSerializer(serializers.Serializer):
    """
    Read-only view of a RideRequest record, in the stored field names.
    """
    id = serializers.CharField()
    riderId = serializers.CharField(source="rider_id", allow_null=True)
    riderName = serializers.CharField(source="rider_name", allow_null=True)
    pickupLocation = LocationSerializer(source="pickup_location")
    dropoffLocation = LocationSerializer(source="dropoff_location", allow_null=True)
    urgency = serializers.CharField(source="urgency.value")
    notes = serializers.CharField()
    status = serializers.CharField(source="status.value")
    createdAt = serializers.DateTimeField(source="created_at", allow_null=True)
    assignedVolunteerId = serializers.CharField(source="assigned_volunteer_id", allow_null=True)
    assignedVolunteerName = serializers.CharField(source="assigned_volunteer_name", allow_null=True)
    acceptedAt = serializers.DateTimeField(source="accepted_at", allow_null=True)


class RideRequestCreateSerializer(serializers.Serializer):
    pickupLocation = LocationSerializer()
    dropoffLocation = LocationSerializer(required=False, allow_null=True)
    urgency = serializers.ChoiceField(choices=[level.value for level in UrgencyLevel])
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    riderName = serializers.CharField(required=False, allow_blank=True)


class RideStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[ride_status.value for ride_status in RideStatus])


class VolunteerAvailabilitySerializer(serializers.Serializer):
    isAvailable = serializers.BooleanField()


class RideRequestCreatedEventSerializer(serializers.Serializer):
    """
    What the event delivery service posts for every new rideRequests document.
    """
    rideId = serializers.CharField()
    data = serializers.DictField()
