"""Mailbox collaborator: find the latest notification sent to a recipient.

Scenarios only need ``fetch_latest(recipient, subject_contains)``.  The
bundled implementation talks to Mailpit's REST API:

    GET  {base}/api/v1/search?query=...   newest first
    GET  {base}/api/v1/message/{id}       full message
    DELETE {base}/api/v1/messages         clear mailbox
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

import httpx

from .polling import EventualCondition, ensure_absent, wait_for

logger = logging.getLogger("ui-scenarios.mailbox")


@dataclass(frozen=True)
class Message:
    """A delivered email as seen by the mailbox service."""

    id: str
    subject: str
    sender: str
    recipients: tuple[str, ...]
    text: str = ""
    html: str = ""
    created: datetime | None = None

    @property
    def body(self) -> str:
        return self.text or self.html

    @classmethod
    def from_mailpit(cls, data: dict[str, Any]) -> Message:
        created = data.get("Created")
        return cls(
            id=data.get("ID", ""),
            subject=data.get("Subject", ""),
            sender=(data.get("From") or {}).get("Address", ""),
            recipients=tuple(entry.get("Address", "") for entry in (data.get("To") or [])),
            text=data.get("Text", ""),
            html=data.get("HTML", ""),
            created=datetime.fromisoformat(created.replace("Z", "+00:00")) if created else None,
        )

    def __repr__(self) -> str:
        return f"<Message id={self.id!r} subject={self.subject!r} to={list(self.recipients)!r}>"


class Mailbox(Protocol):
    def fetch_latest(self, recipient: str, subject_contains: str) -> Message | None: ...


class MailpitMailbox:
    """Synchronous Mailpit REST client.

    Args:
        base_url: Mailpit root URL, e.g. ``http://localhost:8025``.
        username, password: Optional basic-auth credentials.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        auth = (username, password) if username and password else None
        self._client = httpx.Client(
            base_url=f"{self.base_url}/api/v1",
            timeout=timeout,
            auth=auth,
            transport=transport,
        )

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        response = self._client.request(method, endpoint, **kwargs)
        response.raise_for_status()
        return response

    def fetch_latest(self, recipient: str, subject_contains: str) -> Message | None:
        """Newest message to *recipient* whose subject contains *subject_contains*."""
        query = f'to:"{recipient}"'
        if subject_contains:
            query += f' subject:"{subject_contains}"'
        listing = self._request("GET", "/search", params={"query": query, "limit": 10}).json()
        needle = subject_contains.lower()
        for summary in listing.get("messages") or []:
            if needle in (summary.get("Subject") or "").lower():
                data = self._request("GET", f"/message/{summary['ID']}").json()
                return Message.from_mailpit(data)
        return None

    def clear(self) -> None:
        """Delete all messages in the mailbox."""
        self._request("DELETE", "/messages")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> MailpitMailbox:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _arrival(mailbox: Mailbox, recipient: str, subject_contains: str, timeout: float, interval: float) -> EventualCondition:
    return EventualCondition(
        f"email to {recipient} with subject containing '{subject_contains}'",
        lambda: mailbox.fetch_latest(recipient, subject_contains),
        timeout=timeout,
        interval=interval,
        retry_on=(httpx.TransportError,),
    )


def wait_for_message(
    mailbox: Mailbox,
    recipient: str,
    subject_contains: str,
    *,
    timeout: float = 60.0,
    interval: float = 2.0,
    **poll_kwargs: Any,
) -> Message:
    """Poll *mailbox* until the notification arrives; raises ``ConditionTimeout``."""
    started = datetime.now(timezone.utc)
    message = wait_for(_arrival(mailbox, recipient, subject_contains, timeout, interval), **poll_kwargs)
    logger.info("Received %r for %s (waited since %s)", message, recipient, started.isoformat())
    return message


def assert_no_message(
    mailbox: Mailbox,
    recipient: str,
    subject_contains: str,
    *,
    window: float = 15.0,
    interval: float = 2.0,
    **poll_kwargs: Any,
) -> None:
    """Fail with ``AssertionFailed`` if a matching message shows up within *window*."""
    ensure_absent(_arrival(mailbox, recipient, subject_contains, window, interval), **poll_kwargs)
