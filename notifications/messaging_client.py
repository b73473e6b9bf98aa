#Purpose: The Firebase Cloud Messaging "adapter/client".
#Sole responsibility: hand one notification to FCM and return its message id.
#Encapsulates FCM-specific details:
#message construction (token + notification + string-only data map)
#wrapping firebase_admin errors into PushDeliveryError
#It should not contain matching rules or ride lookups.

import logging
from typing import Mapping, Optional

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from store.firebase_app import get_firebase_app

logger = logging.getLogger(__name__)


class PushDeliveryError(Exception):
    """Raised when the push-messaging service rejects or fails a send."""
    pass


class FcmPushClient:
    """
    FCM Adapter / Client

    Sole responsibility:
    - Build a messaging.Message
    - Send it through the shared firebase_admin app
    - Return the FCM message id
    """

    def __init__(self, app=None, dry_run: bool = False):
        self.app = app or get_firebase_app()
        self.dry_run = dry_run #validate with FCM without delivering

    def send(self, token: str, title: str, body: str, data: Optional[Mapping[str, object]] = None) -> str:
        if not token:
            raise PushDeliveryError("A device token is required")

        message = messaging.Message(
            token=token,
            notification=messaging.Notification(title=title, body=body),
            # FCM only accepts string values in the data payload
            data={str(key): str(value) for key, value in (data or {}).items()},
        )

        try:
            message_id = messaging.send(message, dry_run=self.dry_run, app=self.app)
        except (firebase_exceptions.FirebaseError, ValueError) as exc:
            raise PushDeliveryError(str(exc)) from exc

        logger.info("Successfully sent message: %s", message_id)
        return message_id
