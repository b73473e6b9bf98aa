"""
Purpose: Tell the matched volunteer about their new ride.
What it does:
Looks up the volunteer's push token, builds the "New Ride Request"
notification and hands it to the push client.

Delivery is best-effort: a missing token, a failed lookup or a rejected
send is logged and reported as False. Nothing here raises, and the
assignment already written is never undone.
"""

import logging
from dataclasses import dataclass
from typing import Dict

from rides.models import RideRequest
from store.document_store import DocumentStore
from volunteers.models import VOLUNTEERS_COLLECTION

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "New Ride Request"
NOTIFICATION_TYPE = "ride_request"
UNKNOWN_RIDER_NAME = "a rider"


@dataclass(frozen=True)
class RideNotification:
    title: str
    body: str
    data: Dict[str, str]


def build_ride_notification(ride_request: RideRequest) -> RideNotification:
    rider_name = ride_request.rider_name or UNKNOWN_RIDER_NAME
    return RideNotification(
        title=NOTIFICATION_TITLE,
        body=f"Ride request from {rider_name} - {ride_request.urgency.label} priority",
        data={"rideId": ride_request.id, "type": NOTIFICATION_TYPE},
    )


class Notifier:

    def __init__(self, store: DocumentStore, push_client):
        self.store = store
        self.push_client = push_client

    def notify_volunteer(self, volunteer_id: str, ride_request: RideRequest) -> bool:
        """
        Returns True only when the push service accepted the message.
        Any failure, from the store or from whatever push client was
        injected, is logged and reported as False.
        """
        try:
            volunteer = self.store.get(VOLUNTEERS_COLLECTION, volunteer_id)
        except Exception:
            logger.exception("Could not load volunteer %s for notification", volunteer_id)
            return False

        token = (volunteer or {}).get("fcmToken")
        if not token:
            logger.info("No FCM token found for volunteer: %s", volunteer_id)
            return False

        notification = build_ride_notification(ride_request)
        try:
            self.push_client.send(token, notification.title, notification.body, notification.data)
        except Exception:
            logger.exception("Error sending notification to volunteer %s", volunteer_id)
            return False

        logger.info("Notification sent to volunteer: %s", volunteer_id)
        return True
