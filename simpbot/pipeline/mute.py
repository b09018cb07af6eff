"""
MuteFilter - drop messages from muted users before anything else sees them.
"""

from __future__ import annotations

from simpbot.config.logging import get_logger
from simpbot.errors import DeliveryError
from simpbot.pipeline.models import InboundMessage, MessageGateway
from simpbot.storage.config_store import ConfigSession

logger = get_logger(__name__)


class MuteFilter:
    """
    Suppresses messages whose author is muted.

    Suppression holds even when the message cannot be deleted: a failed
    delete is logged and the message is still never dispatched.
    """

    def __init__(self, gateway: MessageGateway) -> None:
        self._gateway = gateway

    async def should_suppress(self, session: ConfigSession, author_id: int) -> bool:
        return await session.is_muted(author_id)

    async def suppress(self, message: InboundMessage) -> None:
        """Request deletion of a muted user's message where the channel allows it."""
        if not self._gateway.can_delete(message.channel_id):
            logger.debug(
                f"Channel {message.channel_id} does not support deletion; "
                f"message {message.message_id} suppressed without delete"
            )
            return

        try:
            await self._gateway.delete_message(message.channel_id, message.message_id)
        except DeliveryError as e:
            logger.warning(
                f"Could not delete message {message.message_id} from muted user "
                f"{message.author_id} in channel {message.channel_id}: {e}"
            )
        else:
            logger.info(
                f"Deleted message {message.message_id} from muted user {message.author_id}"
            )
