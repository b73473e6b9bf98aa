"""
Purpose: The `sendRideNotification` callable.
What it does:
Takes {token, title, body, data} from a client, sends it through the push
client and answers {success, messageId} or {success, error}. Never raises.
"""

import logging
from typing import Any, Dict, Mapping

from .messaging_client import PushDeliveryError

logger = logging.getLogger(__name__)


def send_ride_notification(payload: Mapping[str, Any], push_client) -> Dict[str, Any]:
    token = payload.get("token")
    if not token:
        return {"success": False, "error": "token is required"}

    try:
        message_id = push_client.send(
            token,
            payload.get("title") or "",
            payload.get("body") or "",
            payload.get("data") or {},
        )
    except PushDeliveryError as exc:
        logger.error(f"Error sending message: {exc}")
        return {"success": False, "error": str(exc)}

    return {"success": True, "messageId": message_id}
