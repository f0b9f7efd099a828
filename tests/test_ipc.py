"""
Tests for ZeroMQ message publishing.
"""

import json
from unittest import mock

import pytest
import zmq

import embed_bridge.common.config as config_module
import embed_bridge.common.ipc as ipc_module
from embed_bridge.common.config import Config
from embed_bridge.common.ipc import (
    Message,
    MessagePublisher,
    MessageSubscriber,
    MessageType,
    create_event_publisher,
    get_event_publisher,
)


class TestMessage:
    """Tests for Message serialization."""

    def test_to_json(self):
        message = Message(MessageType.MEDIA_EVENT, {"event": "play"}, "embed_bridge", timestamp=100.0)
        assert json.loads(message.to_json()) == {
            "type": "media_event",
            "data": {"event": "play"},
            "sender": "embed_bridge",
            "timestamp": 100.0,
        }

    def test_from_json(self):
        message = Message.from_json(json.dumps({
            "type": "renderer_status",
            "data": {"ready": True},
            "sender": "loader",
            "timestamp": 5.0,
        }))
        assert message.msg_type is MessageType.RENDERER_STATUS
        assert message.data == {"ready": True}

    def test_timestamp_generated(self):
        assert Message(MessageType.MEDIA_EVENT, {}, "x").timestamp > 0

    def test_repr(self):
        assert "media_event" in repr(Message(MessageType.MEDIA_EVENT, {}, "x"))


@pytest.fixture
def zmq_context():
    with mock.patch("embed_bridge.common.ipc.zmq.Context") as context_cls, \
            mock.patch("embed_bridge.common.ipc.time.sleep"):
        yield context_cls.return_value


class TestMessagePublisher:
    """Tests for MessagePublisher."""

    def test_binds_pub_socket(self, zmq_context):
        MessagePublisher(port=5560, service_name="embed_bridge")
        zmq_context.socket.assert_called_once_with(zmq.PUB)
        zmq_context.socket.return_value.bind.assert_called_once_with("tcp://*:5560")

    def test_publish_sends_topic_and_body(self, zmq_context):
        publisher = MessagePublisher(port=5560, service_name="embed_bridge")
        publisher.publish(MessageType.MEDIA_EVENT, {"event": "pause"})

        sent = zmq_context.socket.return_value.send_string.call_args[0][0]
        topic, body = sent.split(" ", 1)
        assert topic == "media_event"
        assert Message.from_json(body).data == {"event": "pause"}

    def test_close(self, zmq_context):
        publisher = MessagePublisher(port=5560, service_name="embed_bridge")
        publisher.close()
        zmq_context.socket.return_value.close.assert_called_once()
        zmq_context.term.assert_called_once()


class TestMessageSubscriber:
    """Tests for MessageSubscriber."""

    def test_receive_decodes_message(self, zmq_context):
        body = Message(MessageType.MEDIA_EVENT, {"event": "ended"}, "embed_bridge").to_json()
        zmq_context.socket.return_value.recv_string.return_value = f"media_event {body}"

        subscriber = MessageSubscriber("localhost", 5560, "listener")
        message = subscriber.receive(timeout_ms=10)

        assert message.data == {"event": "ended"}

    def test_receive_timeout(self, zmq_context):
        zmq_context.socket.return_value.recv_string.side_effect = zmq.Again()
        subscriber = MessageSubscriber("localhost", 5560, "listener")
        assert subscriber.receive(timeout_ms=10) is None

    def test_receive_malformed(self, zmq_context):
        zmq_context.socket.return_value.recv_string.return_value = "garbage"
        subscriber = MessageSubscriber("localhost", 5560, "listener")
        assert subscriber.receive(timeout_ms=10) is None

    def test_subscribe_to(self, zmq_context):
        subscriber = MessageSubscriber("localhost", 5560, "listener")
        subscriber.subscribe_to(MessageType.MEDIA_EVENT)
        zmq_context.socket.return_value.setsockopt_string.assert_called_with(zmq.SUBSCRIBE, "media_event")


class TestCreateEventPublisher:
    """Tests for config-driven publisher creation."""

    def test_disabled_by_default(self, zmq_context):
        config = Config()
        assert create_event_publisher(config) is None
        zmq_context.socket.assert_not_called()

    def test_enabled_binds_configured_port(self, zmq_context):
        config = Config()
        config.set('events.publish', True)
        config.set('events.port', 6001)

        publisher = create_event_publisher(config)

        assert publisher.port == 6001
        zmq_context.socket.return_value.bind.assert_called_once_with("tcp://*:6001")


class TestGetEventPublisher:
    """Tests for the global event publisher."""

    @pytest.fixture(autouse=True)
    def reset_globals(self, monkeypatch):
        monkeypatch.setattr(config_module, "_global_config", None)
        monkeypatch.setattr(ipc_module, "_global_publisher", None)
        monkeypatch.setattr(ipc_module, "_global_publisher_checked", False)

    def test_disabled_returns_none(self, zmq_context):
        assert get_event_publisher() is None
        assert get_event_publisher() is None
        zmq_context.socket.assert_not_called()

    def test_created_once(self, zmq_context):
        config_module.get_config().set('events.publish', True)
        first = get_event_publisher()
        assert get_event_publisher() is first
        zmq_context.socket.return_value.bind.assert_called_once()
