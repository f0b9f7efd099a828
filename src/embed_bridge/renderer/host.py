"""
Host surface for the renderer: a minimal document model.

The bridge only needs to create a container element, insert it next to
the original media node, hide that node, attach a script to the document
head and expose a global callback. Media elements dispatch canonical
events to registered listeners and, optionally, to a ZeroMQ publisher.
"""

from typing import Any, Callable, Dict, List, Optional

from embed_bridge.common.ipc import MessagePublisher, MessageType
from embed_bridge.common.logger import setup_logger

logger = setup_logger(__name__)

Listener = Callable[[Any], None]


class EventTarget:
    """Listener registry keyed by event type."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        """Register a listener for an event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> bool:
        """
        Unregister a listener.

        Returns:
            True if the listener was registered
        """
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def listener_count(self, event_type: str) -> int:
        """Number of listeners registered for an event type."""
        return len(self._listeners.get(event_type, []))

    def dispatch_event(self, event: Any) -> None:
        """
        Deliver an event to every listener for its type.

        A failing listener is logged and does not stop delivery to the rest.
        """
        for listener in list(self._listeners.get(event.type, [])):
            try:
                listener(event)
            except Exception as e:
                logger.error("Error in %s listener: %s", event.type, e)


class Element(EventTarget):
    """A node in the document tree."""

    def __init__(
        self,
        tag: str,
        element_id: str = "",
        attributes: Optional[Dict[str, str]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ):
        """
        Create an element.

        Args:
            tag: Tag name (div, video, script, ...)
            element_id: Element id
            attributes: Markup attributes (autoplay, src, ...)
            width: Rendered width in pixels
            height: Rendered height in pixels
        """
        super().__init__()
        self.tag = tag
        self.id = element_id
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.width = width
        self.height = height
        self.style: Dict[str, str] = {}
        self.text = ""
        self.parent: Optional["Element"] = None
        self.children: List["Element"] = []

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def append_child(self, child: "Element") -> "Element":
        """Append child as the last child of this element."""
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def insert_before(self, new_child: "Element", reference: Optional["Element"]) -> "Element":
        """
        Insert new_child immediately before reference.

        Args:
            new_child: Element to insert
            reference: Existing child, or None to append

        Raises:
            ValueError: If reference is not a child of this element
        """
        if reference is None:
            return self.append_child(new_child)
        if reference not in self.children:
            raise ValueError(f"{reference!r} is not a child of {self!r}")

        if new_child.parent is not None:
            new_child.parent.children.remove(new_child)
        new_child.parent = self
        self.children.insert(self.children.index(reference), new_child)
        return new_child

    def hide(self) -> None:
        self.style['display'] = 'none'

    def show(self) -> None:
        self.style.pop('display', None)

    @property
    def hidden(self) -> bool:
        """Check if the element is hidden."""
        return self.style.get('display') == 'none'

    def find_by_id(self, element_id: str) -> Optional["Element"]:
        """Depth-first search for a descendant (or self) with the given id."""
        if self.id == element_id:
            return self
        for child in self.children:
            found = child.find_by_id(element_id)
            if found is not None:
                return found
        return None

    def __repr__(self) -> str:
        """String representation."""
        return f"Element(tag={self.tag}, id={self.id!r})"


class Document:
    """Document with a head, a body and a window namespace for globals."""

    def __init__(self):
        self.head = Element("head")
        self.body = Element("body")
        self.window: Dict[str, Any] = {}

    def create_element(self, tag: str, element_id: str = "") -> Element:
        return Element(tag, element_id)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self.head.find_by_id(element_id) or self.body.find_by_id(element_id)

    def inject_script(self, src: str, text: Optional[str] = None) -> Element:
        """
        Attach a script element to the document head.

        Args:
            src: Script URL
            text: Script body, when it was fetched ahead of time

        Returns:
            The script element
        """
        script = self.create_element("script")
        script.set_attribute("src", src)
        if text is not None:
            script.text = text
        self.head.append_child(script)
        logger.debug("Injected script: %s", src)
        return script

    @property
    def scripts(self) -> List[Element]:
        """Script elements currently in the head."""
        return [child for child in self.head.children if child.tag == "script"]


class MediaElement(EventTarget):
    """
    The caller-facing media element a renderer is attached to.

    Wraps the original media node (the one the renderer replaces) and is
    the sink for every canonical event the renderer produces.
    """

    def __init__(
        self,
        element_id: str,
        original_node: Element,
        publisher: Optional[MessagePublisher] = None
    ):
        """
        Args:
            element_id: Id used to derive renderer container ids
            original_node: Media node in the document (must have a parent)
            publisher: Optional ZeroMQ publisher mirroring dispatched events
        """
        super().__init__()
        self.id = element_id
        self.original_node = original_node
        self._publisher = publisher

    @property
    def publisher(self) -> Optional[MessagePublisher]:
        """ZeroMQ publisher mirroring dispatched events, if any."""
        return self._publisher

    @publisher.setter
    def publisher(self, publisher: Optional[MessagePublisher]) -> None:
        self._publisher = publisher

    def get_attribute(self, name: str) -> Optional[str]:
        return self.original_node.get_attribute(name)

    @property
    def autoplay(self) -> bool:
        """Check if the markup requests autoplay."""
        return bool(self.get_attribute('autoplay'))

    def dispatch_event(self, event: Any) -> None:
        """Deliver an event to listeners, then publish it if a publisher is set."""
        super().dispatch_event(event)

        if self._publisher is not None:
            self._publisher.publish(
                MessageType.MEDIA_EVENT,
                {"event": event.type, "target": getattr(event.target, "id", None)}
            )

    def __repr__(self) -> str:
        """String representation."""
        return f"MediaElement(id={self.id!r})"
