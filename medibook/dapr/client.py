"""Dapr client for publishing lifecycle events to the notification subsystem."""
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Any

from dapr.clients import DaprClient

from medibook.config import settings

logger = logging.getLogger(__name__)

NOTIFICATIONS_TOPIC = "notifications"
APPOINTMENTS_TOPIC = "appointment-events"


class DaprEventPublisher:
    """Publishes lifecycle events via Dapr pub/sub, or logs them in development mode."""

    def __init__(self, enabled: bool = False, pubsub_name: str = "medibook-pubsub", source: str = "medibook-lifecycle"):
        """
        Initialize Dapr event publisher.

        Args:
            enabled: Publish through the Dapr sidecar; when False events are only logged
            pubsub_name: Dapr pub/sub component name
            source: Value of the envelope's `source` field
        """
        self.enabled = enabled
        self.pubsub_name = pubsub_name
        self.source = source
        if not self.enabled:
            logger.info("Event publishing disabled. Lifecycle events will be logged only.")

    def publish_event(self, topic: str, event_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Publish an event envelope to a topic."""
        event_envelope = {
            "event_id": str(uuid.uuid4()),
            "type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source": self.source,
            "data": data
        }

        if not self.enabled:
            logger.info(f"[DEV MODE] Would publish to topic '{topic}': {event_type} with data {data}")
            return {"success": True, "event_id": event_envelope["event_id"], "published": False}

        with DaprClient() as client:
            client.publish_event(
                pubsub_name=self.pubsub_name,
                topic_name=topic,
                data=json.dumps(event_envelope, default=str),
                data_content_type="application/json"
            )

        logger.info(f"Published event {event_type} to topic {topic}")
        return {"success": True, "event_id": event_envelope["event_id"], "published": True}

    def publish_notification_created(self, notification_data: Dict[str, Any]):
        """Publish notification.created so delivery channels can fan out."""
        return self.publish_event(
            topic=NOTIFICATIONS_TOPIC,
            event_type="notification.created",
            data=notification_data
        )

    def publish_appointment_missed(self, appointment_data: Dict[str, Any]):
        """Publish appointment.missed event."""
        return self.publish_event(
            topic=APPOINTMENTS_TOPIC,
            event_type="appointment.missed",
            data=appointment_data
        )


# Global instance
event_publisher = DaprEventPublisher(enabled=settings.events_enabled, pubsub_name=settings.pubsub_name)
