"""Send-only Telegram Bot API client for scoreboard announcements."""

from __future__ import annotations

import logging
import os
import time

import httpx

logger = logging.getLogger("scoreboard.telegram")

BASE_URL = "https://api.telegram.org/bot{token}"
MESSAGE_LIMIT = 4096
MAX_RETRY_AFTER = 5


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Pack paragraphs into chunks under Telegram's message limit.

    An oversized paragraph is cut at its last line break before the limit,
    so HTML tags (which never span lines here) stay whole. A single line
    longer than the limit is cut at the limit.
    """
    chunks: list[str] = []
    current = ""
    for paragraph in text.split("\n\n"):
        while len(paragraph) > limit:
            if current:
                chunks.append(current)
                current = ""
            cut = paragraph.rfind("\n", 0, limit + 1)
            if cut <= 0:
                chunks.append(paragraph[:limit])
                paragraph = paragraph[limit:]
            else:
                chunks.append(paragraph[:cut])
                paragraph = paragraph[cut + 1:]
        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if len(candidate) > limit:
            chunks.append(current)
            current = paragraph
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


class TelegramClient:
    """Posts HTML messages to a chat. Unset token means not configured."""

    def __init__(
        self,
        token: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
        self._base = BASE_URL.format(token=self._token)
        self._client = client or httpx.Client(timeout=10.0)

    @property
    def configured(self) -> bool:
        return bool(self._token)

    def send_message(
        self,
        chat_id: str | int,
        text: str,
        parse_mode: str = "HTML",
    ) -> dict:
        """Send text, split over several messages when too long.

        Returns the API response for the last chunk sent.
        """
        data: dict = {"ok": False}
        for chunk in split_message(text):
            data = self._post("sendMessage", {
                "chat_id": chat_id,
                "text": chunk,
                "parse_mode": parse_mode,
                "disable_notification": True,
            })
            if not data.get("ok"):
                break
        return data

    def _post(self, method: str, payload: dict) -> dict:
        url = f"{self._base}/{method}"
        data: dict = self._client.post(url, json=payload).json()
        retry_after = data.get("parameters", {}).get("retry_after")
        if not data.get("ok") and retry_after is not None and retry_after <= MAX_RETRY_AFTER:
            logger.warning("Telegram rate limited on %s, retrying in %ss", method, retry_after)
            time.sleep(retry_after)
            data = self._client.post(url, json=payload).json()
        if not data.get("ok"):
            logger.error("Telegram API error on %s: %s", method, data)
        return data
