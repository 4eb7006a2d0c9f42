from contextlib import contextmanager
from typing import Any, Dict, List, Optional

# Import the actual singleton to patch it in-place
import splice.common
from splice.common.messaging.protocols import Renderer


class SpyRenderer(Renderer):
    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    def render(self, message: str, level: str) -> None:
        pass

    def record(self, level: str, msg_id: str, params: Dict[str, Any]):
        self.messages.append({"level": level, "id": str(msg_id), "params": params})


class SpyBus:
    """
    Spies on the global `splice.common.bus` singleton.

    Modules hold the bus via `from splice.common import bus`, so replacing the
    instance would miss them. The instance's `_render` is patched instead.
    """

    def __init__(self):
        self._spy_renderer = SpyRenderer()

    @contextmanager
    def patch(self, monkeypatch: Any):
        real_bus = splice.common.bus

        def intercept_render(level: str, msg_id: str, **kwargs: Any) -> None:
            # Capture the intent only; nothing reaches stdout.
            self._spy_renderer.record(level, msg_id, kwargs)

        monkeypatch.setattr(real_bus, "_render", intercept_render)
        monkeypatch.setattr(real_bus, "_renderer", self._spy_renderer)

        yield self

    def get_messages(self) -> List[Dict[str, Any]]:
        return self._spy_renderer.messages

    def ids(self, level: Optional[str] = None) -> List[str]:
        return [
            m["id"]
            for m in self.get_messages()
            if level is None or m["level"] == level
        ]

    def assert_id_called(self, msg_id: str, level: Optional[str] = None):
        if msg_id in self.ids(level):
            return
        ids_seen = [m["id"] for m in self.get_messages()]
        raise AssertionError(
            f"Message with ID '{msg_id}' was not sent.\nCaptured IDs: {ids_seen}"
        )

    def assert_id_not_called(self, msg_id: str, level: Optional[str] = None):
        if msg_id in self.ids(level):
            raise AssertionError(f"Message with ID '{msg_id}' was unexpectedly sent.")
