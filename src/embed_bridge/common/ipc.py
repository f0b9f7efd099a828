"""
IPC (Inter-Process Communication) using ZeroMQ.
Mirrors renderer events to other processes via message passing.
"""

import zmq
import json
import time
from typing import Optional, Dict, Any
from enum import Enum

from .config import Config, get_config
from .logger import setup_logger

logger = setup_logger(__name__)


class MessageType(Enum):
    """Types of messages that can be published."""
    MEDIA_EVENT = "media_event"            # Canonical lifecycle events
    RENDERER_STATUS = "renderer_status"    # Loader / adapter status updates


class Message:
    """Standard message format for IPC."""

    def __init__(
        self,
        msg_type: MessageType,
        data: Dict[str, Any],
        sender: str,
        timestamp: Optional[float] = None
    ):
        """
        Create a message.

        Args:
            msg_type: Type of message
            data: Message payload
            sender: Name of the component that sent the message
            timestamp: Unix timestamp (auto-generated if None)
        """
        self.msg_type = msg_type
        self.data = data
        self.sender = sender
        self.timestamp = timestamp or time.time()

    def to_json(self) -> str:
        """Serialize message to JSON string."""
        return json.dumps({
            "type": self.msg_type.value,
            "data": self.data,
            "sender": self.sender,
            "timestamp": self.timestamp
        })

    @classmethod
    def from_json(cls, json_str: str) -> "Message":
        """Deserialize message from JSON string."""
        obj = json.loads(json_str)
        return cls(
            msg_type=MessageType(obj["type"]),
            data=obj["data"],
            sender=obj["sender"],
            timestamp=obj["timestamp"]
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"Message(type={self.msg_type.value}, sender={self.sender}, data={self.data})"


class MessagePublisher:
    """Publishes messages to subscribers (PUB socket)."""

    def __init__(self, port: int, service_name: str):
        """
        Initialize publisher.

        Args:
            port: Port to publish on
            service_name: Name of this service
        """
        self.port = port
        self.service_name = service_name
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.PUB)
        self.socket.bind(f"tcp://*:{port}")

        # Give subscribers time to connect
        time.sleep(0.1)

        logger.info("Publisher started: %s on port %s", service_name, port)

    def publish(self, msg_type: MessageType, data: Dict[str, Any]) -> None:
        """
        Publish a message.

        Args:
            msg_type: Type of message
            data: Message payload
        """
        message = Message(msg_type, data, self.service_name)

        # Message type as topic, then message
        self.socket.send_string(f"{msg_type.value} {message.to_json()}")
        logger.debug("Published: %s", message)

    def close(self) -> None:
        """Close the publisher."""
        self.socket.close()
        self.context.term()
        logger.info("Publisher closed: %s", self.service_name)


class MessageSubscriber:
    """Subscribes to messages from publishers (SUB socket)."""

    def __init__(self, host: str, port: int, service_name: str):
        """
        Initialize subscriber.

        Args:
            host: Host to connect to (usually 'localhost')
            port: Port to connect to
            service_name: Name of this service
        """
        self.host = host
        self.port = port
        self.service_name = service_name
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.SUB)
        self.socket.connect(f"tcp://{host}:{port}")

        # Subscribe to all message types by default
        self.socket.setsockopt_string(zmq.SUBSCRIBE, "")

        logger.info("Subscriber started: %s connected to %s:%s", service_name, host, port)

    def subscribe_to(self, msg_type: MessageType) -> None:
        """
        Subscribe to specific message type.

        Args:
            msg_type: Message type to subscribe to
        """
        self.socket.setsockopt_string(zmq.SUBSCRIBE, msg_type.value)
        logger.debug("Subscribed to: %s", msg_type.value)

    def receive(self, timeout_ms: int = 1000) -> Optional[Message]:
        """
        Receive a message (blocking with timeout).

        Args:
            timeout_ms: Timeout in milliseconds

        Returns:
            Message or None if timeout
        """
        self.socket.setsockopt(zmq.RCVTIMEO, timeout_ms)

        try:
            raw_message = self.socket.recv_string()
        except zmq.Again:
            return None

        # Split topic and message
        parts = raw_message.split(' ', 1)
        if len(parts) != 2:
            logger.warning("Dropping malformed message: %r", raw_message)
            return None

        try:
            message = Message.from_json(parts[1])
        except (ValueError, KeyError) as e:
            logger.error("Error decoding message: %s", e)
            return None

        logger.debug("Received: %s", message)
        return message

    def close(self) -> None:
        """Close the subscriber."""
        self.socket.close()
        self.context.term()
        logger.info("Subscriber closed: %s", self.service_name)


def create_event_publisher(config: Config, service_name: str = "embed_bridge") -> Optional[MessagePublisher]:
    """
    Create the event publisher if events.publish is enabled.

    Args:
        config: Configuration (events.publish and events.port keys)
        service_name: Sender name stamped on published messages

    Returns:
        MessagePublisher, or None when publishing is disabled
    """
    if not config.get('events.publish', False):
        return None
    return MessagePublisher(int(config.get('events.port', 5560)), service_name)


# Global event publisher (one PUB socket per process)
_global_publisher: Optional[MessagePublisher] = None
_global_publisher_checked = False


def get_event_publisher() -> Optional[MessagePublisher]:
    """
    Get the global event publisher, created from the global config on first use.

    Returns:
        MessagePublisher, or None when events.publish is disabled
    """
    global _global_publisher, _global_publisher_checked

    if not _global_publisher_checked:
        _global_publisher = create_event_publisher(get_config())
        _global_publisher_checked = True

    return _global_publisher
