from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import List, Optional
from uuid import uuid4


class MockSQSQueue:
    """In-memory stand-in for an SQS queue, optionally persisted to disk.

    Each message is written to ``<root_path>/<sequence>-<message_id>.json`` so
    a later instance pointed at the same directory sees the same backlog.
    """

    def __init__(self, name: str, root_path: Optional[Path] = None) -> None:
        self.name = name
        self.root_path = root_path
        self._messages: List[tuple[str, str]] = []
        self._lock = Lock()
        if root_path:
            root_path.mkdir(parents=True, exist_ok=True)
            self._load_existing_messages()

    def send_message(self, body: str) -> str:
        message_id = str(uuid4())
        with self._lock:
            sequence = len(self._messages)
            self._messages.append((message_id, body))
            if self.root_path:
                path = self.root_path / f"{sequence:08d}-{message_id}.json"
                path.write_text(body, encoding="utf-8")
        return message_id

    def list_messages(self) -> List[str]:
        """Return message bodies in the order they were sent."""
        with self._lock:
            return [body for _, body in self._messages]

    def purge(self) -> None:
        with self._lock:
            self._messages.clear()
            if self.root_path:
                for path in self.root_path.glob("*.json"):
                    path.unlink()

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def _load_existing_messages(self) -> None:
        assert self.root_path is not None
        for path in sorted(self.root_path.glob("*.json")):
            _, _, message_id = path.stem.partition("-")
            self._messages.append((message_id, path.read_text(encoding="utf-8")))
