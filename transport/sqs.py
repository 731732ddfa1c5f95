"""Amazon SQS delivery for encoded observations."""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from services.errors import DeliveryError

logger = logging.getLogger(__name__)


def get_sqs_client(
    region: str,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
) -> Any:
    """Create a boto3 SQS client.

    Explicit keys override the environment and the shared credentials file;
    when omitted, boto3's default credential chain applies.
    """
    client_config = Config(retries={"max_attempts": 3, "mode": "standard"})
    client_kwargs = {
        "service_name": "sqs",
        "region_name": region,
        "config": client_config,
    }
    if access_key and secret_key:
        client_kwargs["aws_access_key_id"] = access_key
        client_kwargs["aws_secret_access_key"] = secret_key
    return boto3.client(**client_kwargs)


class SQSQueue:
    """Sends message bodies to a named SQS queue."""

    def __init__(self, name: str, region: str, client: Any = None) -> None:
        self.name = name
        self.region = region
        self._client = client if client is not None else get_sqs_client(region)
        try:
            response = self._client.get_queue_url(QueueName=name)
        except (BotoCoreError, ClientError) as exc:
            raise DeliveryError(
                f"unable to get amazon queue: {exc} [{name}/{region}]"
            ) from exc
        self.url: str = response["QueueUrl"]

    def send_message(self, body: str) -> str:
        try:
            response = self._client.send_message(QueueUrl=self.url, MessageBody=body)
        except (BotoCoreError, ClientError) as exc:
            raise DeliveryError(f"unable to send hilltop msg: {exc}") from exc
        message_id = response.get("MessageId", "")
        logger.debug("sent message", extra={"message_id": message_id})
        return message_id
