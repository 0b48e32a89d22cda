"""Deliver casino replies to Telegram after the ledger has already been saved.

A reply that cannot be delivered never rolls anything back: the round is
settled either way. Every attempt ends in a :class:`Delivery` whose status
tells the handler what happened to the player's message.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramRetryAfter,
)
from aiogram.types import CallbackQuery, Message

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


class DeliveryStatus(str, Enum):
    SENT = "SENT"
    UNCHANGED = "UNCHANGED"
    BLOCKED = "BLOCKED"
    THROTTLED = "THROTTLED"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class Delivery:
    status: DeliveryStatus
    attempts: int
    result: Any = None

    @property
    def sent(self) -> bool:
        return self.status is DeliveryStatus.SENT


def classify_failure(exc: TelegramAPIError) -> DeliveryStatus:
    if isinstance(exc, TelegramForbiddenError):
        return DeliveryStatus.BLOCKED
    if isinstance(exc, TelegramBadRequest) and "message is not modified" in str(exc).lower():
        return DeliveryStatus.UNCHANGED
    return DeliveryStatus.FAILED


async def deliver(
    what: str,
    send: Callable[..., Awaitable[Any]],
    *args: Any,
    chat_id: int | None = None,
    max_attempts: int = MAX_ATTEMPTS,
    **kwargs: Any,
) -> Delivery:
    """Call ``send`` and wait out flood control up to ``max_attempts`` times."""
    for attempt in range(1, max_attempts + 1):
        try:
            return Delivery(DeliveryStatus.SENT, attempt, await send(*args, **kwargs))
        except TelegramRetryAfter as exc:
            if attempt == max_attempts:
                break
            pause = float(exc.retry_after or 1.0)
            logger.info("Flood control on %s for chat %s; pausing %.1f s", what, chat_id, pause)
            await asyncio.sleep(pause)
        except TelegramAPIError as exc:
            status = classify_failure(exc)
            if status is DeliveryStatus.BLOCKED:
                logger.info("Chat %s blocked the casino; dropped %s", chat_id, what)
            elif status is DeliveryStatus.UNCHANGED:
                logger.debug("Skipped %s for chat %s: table unchanged", what, chat_id)
            else:
                logger.warning("Could not deliver %s to chat %s: %s", what, chat_id, exc)
            return Delivery(status, attempt)
    logger.warning("Gave up on %s for chat %s after %s attempts", what, chat_id, max_attempts)
    return Delivery(DeliveryStatus.THROTTLED, max_attempts)


async def reply_to(message: Message | None, text: str, **kwargs: Any) -> Delivery | None:
    """Answer the player's message; ``None`` when there is nothing to answer."""
    if message is None:
        return None
    return await deliver("reply", message.answer, text, chat_id=message.chat.id, **kwargs)


async def acknowledge(callback: CallbackQuery | None) -> Delivery | None:
    """Stop the button spinner on the player's side."""
    if callback is None:
        return None
    return await deliver("button ack", callback.answer, chat_id=callback.from_user.id)
