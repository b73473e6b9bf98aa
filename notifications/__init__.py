#Marks notifications as a package.
#Re-exports the push client, the volunteer notifier and the sendRideNotification callable.
#No business logic.

from .callable import send_ride_notification
from .messaging_client import FcmPushClient, PushDeliveryError
from .notifier import Notifier, build_ride_notification

__all__ = [
    "FcmPushClient",
    "PushDeliveryError",
    "Notifier",
    "build_ride_notification",
    "send_ride_notification",
]
