"""Message queue backends for delivering encoded observations."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from settings import get_settings
from transport.mock_sqs import MockSQSQueue
from transport.sqs import SQSQueue, get_sqs_client


@runtime_checkable
class MessageQueue(Protocol):
    def send_message(self, body: str) -> str: ...


@lru_cache
def build_default_queue(
    name: Optional[str] = None,
    region: Optional[str] = None,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
) -> MessageQueue:
    """Build the queue selected by ``HILLTOP_QUEUE_BACKEND``."""
    settings = get_settings()
    queue_name = settings.queue_name if name is None else name
    if not queue_name:
        raise ValueError("unable to find queue in environment or command line [AWS_FITS_QUEUE]")

    if settings.queue_backend == "mock":
        root = settings.mock_queue_root_path
        return MockSQSQueue(name=queue_name, root_path=Path(root) / queue_name if root else None)

    queue_region = settings.region if region is None else region
    if not queue_region:
        raise ValueError("unable to find region in environment or command line [AWS_FITS_REGION]")

    client = get_sqs_client(queue_region, access_key=access_key, secret_key=secret_key)
    return SQSQueue(name=queue_name, region=queue_region, client=client)
