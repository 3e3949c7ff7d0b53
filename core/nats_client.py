"""
NATS JetStream Client for Python Microservices
Provides event-driven communication between services

Thin wrapper around nats-py exposing the Event envelope and a
publish-only event bus used by the crowdfunding service.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

import nats
from nats.aio.client import Client as NATS
from nats.js import JetStreamContext

if TYPE_CHECKING:
    from core.config import NATSConfig


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles Decimal types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event types published on the bus"""

    # Campaign Events
    CAMPAIGN_CREATED = "campaign.created"
    CAMPAIGN_CONTRIBUTION_RECEIVED = "campaign.contribution.received"
    CAMPAIGN_GOAL_REACHED = "campaign.goal.reached"


class ServiceSource(Enum):
    """Service sources"""

    CROWDFUNDING_SERVICE = "crowdfunding_service"


class Event:
    """Event model"""

    def __init__(
        self,
        event_type: EventType,
        source: ServiceSource,
        data: Dict[str, Any],
        subject: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = str(uuid.uuid4())
        self.type = event_type.value
        self.source = source.value
        self.data = data
        self.subject = subject
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "source": self.source,
            "subject": self.subject,
            "timestamp": self.timestamp,
            "data": self.data,
            "metadata": self.metadata,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        event = cls.__new__(cls)
        event.id = data.get("id")
        event.type = data.get("type")
        event.source = data.get("source")
        event.subject = data.get("subject")
        event.timestamp = data.get("timestamp")
        event.data = data.get("data", {})
        event.metadata = data.get("metadata", {})
        event.version = data.get("version", "1.0.0")
        return event


class NATSEventBus:
    """
    NATS JetStream event bus.

    Publishes Event envelopes as JSON to the stream that owns the
    event's subject prefix.
    """

    def __init__(self, service_name: str, config: "NATSConfig"):
        self.service_name = service_name
        self.url = config.url
        self.stream = config.stream
        self.connect_timeout = config.connect_timeout

        self._client: Optional[NATS] = None
        self._js: Optional[JetStreamContext] = None
        self._stream_ready = False

        logger.info(f"NATS EventBus initialized: {self.url}")

    async def connect(self):
        """Connect to NATS and open a JetStream context"""
        try:
            self._client = await nats.connect(
                servers=[self.url],
                name=self.service_name,
                connect_timeout=self.connect_timeout,
            )
            self._js = self._client.jetstream()
            logger.info(f"Connected to NATS as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

    async def _ensure_stream(self, subject_prefix: str) -> None:
        if self._stream_ready:
            return
        try:
            await self._js.add_stream(name=self.stream, subjects=[f"{subject_prefix}.>"])
        except Exception as e:
            logger.debug(f"Stream creation note: {e}")
        self._stream_ready = True

    async def publish_event(self, event: Event) -> bool:
        """
        Publish an event to NATS JetStream.

        The event type doubles as the subject (e.g. "campaign.created").
        Returns False instead of raising when the bus is unavailable.
        """
        if not self.is_connected or not self._js:
            logger.error("Not connected to NATS")
            return False

        try:
            data = json.dumps(event.to_dict(), cls=DecimalEncoder).encode()
            await self._ensure_stream(event.type.split('.')[0])

            ack = await self._js.publish(event.type, data, stream=self.stream)
            logger.info(f"Published event {event.type} [{event.id}] to stream {ack.stream}, seq={ack.seq}")
            return True

        except Exception as e:
            logger.error(f"Error publishing event {event.id}: {e}")
            return False

    async def close(self):
        """Drain and close the NATS connection"""
        if self._client:
            try:
                await self._client.drain()
            except Exception as e:
                logger.warning(f"NATS drain failed: {e}")
            self._client = None
            self._js = None

        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        """Check if connected to NATS"""
        return self._client is not None and self._client.is_connected


def create_event(
    event_type: EventType,
    source: ServiceSource,
    data: Dict[str, Any],
    subject: Optional[str] = None,
    metadata: Optional[Dict[str, str]] = None,
) -> Event:
    """Create an Event instance"""
    return Event(
        event_type=event_type,
        source=source,
        data=data,
        subject=subject,
        metadata=metadata,
    )
