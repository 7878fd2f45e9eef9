"""Per-chat prompt state, kept in DynamoDB.

When the bot asks a chat for a driver or passenger name, the pending prompt
is stored under the chat id. The next message from that chat answers it and
the entry is removed, so each prompt is consumed exactly once.
"""

import logging
from enum import Enum
from time import time
from typing import Any

logger = logging.getLogger(__name__)

PROMPT_TTL_SECONDS = 3600


class PendingPrompt(str, Enum):
    DRIVER = "driver"
    PASSENGER = "passenger"


class ChatSessionStore:
    def __init__(self, dynamo_client: Any, table_name: str) -> None:
        self._client = dynamo_client
        self._table = table_name

    def set_pending(self, chat_id: int, prompt: PendingPrompt) -> None:
        """Store the pending prompt with a one-hour TTL."""
        ttl = int(time()) + PROMPT_TTL_SECONDS
        self._client.put_item(
            TableName=self._table,
            Item={"chatId": {"S": str(chat_id)}, "pending": {"S": prompt.value}, "ttl": {"N": str(ttl)}},
        )

    def get_pending(self, chat_id: int) -> PendingPrompt | None:
        response = self._client.get_item(
            TableName=self._table,
            Key={"chatId": {"S": str(chat_id)}},
            ConsistentRead=True,
        )
        return self._prompt_from_item(chat_id, response.get("Item"))

    def _prompt_from_item(self, chat_id: int, item: dict[str, Any] | None) -> PendingPrompt | None:
        if not item:
            return None
        # DynamoDB TTL deletion is lazy; expired items can still be returned.
        if int(item.get("ttl", {}).get("N", "0")) < int(time()):
            return None
        try:
            return PendingPrompt(item["pending"]["S"])
        except (KeyError, ValueError):
            logger.warning("Ignoring malformed session item for chat %s", chat_id)
            return None

    def clear(self, chat_id: int) -> None:
        self._client.delete_item(
            TableName=self._table,
            Key={"chatId": {"S": str(chat_id)}},
        )

    def pop_pending(self, chat_id: int) -> PendingPrompt | None:
        """Return and clear the pending prompt for a chat.

        The delete returns the removed item, so two concurrent messages cannot
        both consume the same prompt.
        """
        response = self._client.delete_item(
            TableName=self._table,
            Key={"chatId": {"S": str(chat_id)}},
            ReturnValues="ALL_OLD",
        )
        return self._prompt_from_item(chat_id, response.get("Attributes"))
