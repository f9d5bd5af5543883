"""Resources – EnquiryClient (enquiries and their message threads)."""
from __future__ import annotations

import enum
import itertools
from typing import Any, Callable, Mapping

from rental_query.application.cache import QueryCache
from rental_query.application.pagination import PaginationDescriptor
from rental_query.application.query import ResourceStore, StoreListener, paginated_envelope
from rental_query.application.query.engine import ResourceQueryEngine
from rental_query.kernel.errors import EnvelopeError
from rental_query.resources.definitions import ENQUIRY_MESSAGES_TTL

__all__ = ["EnquiryClient", "EnquiryStatus", "unread_count"]

Enquiry = dict[str, Any]
Message = dict[str, Any]

MESSAGES = "messages"
MARK_AS_READ = "mark-as-read"


class EnquiryStatus(str, enum.Enum):
    """Lifecycle of an enquiry as the API reports it."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


def unread_count(enquiry: Mapping[str, Any]) -> int:
    """Unread messages of *enquiry*, from its thread when it carries one."""
    messages = enquiry.get("messages")
    if isinstance(messages, list):
        return sum(1 for message in messages if not message.get("is_read", False))
    count = enquiry.get("unread_count")
    return count if isinstance(count, int) else 0


class EnquiryClient(ResourceQueryEngine[Enquiry]):
    """Enquiries plus the message thread of one enquiry at a time.

    The thread has its own store (``messages``, ``messages_error``,
    ``messages_loading``) and its own cache keyed per enquiry. Thread fetches
    are ticketed like list fetches: only the newest one, and only if no
    message was sent meanwhile, replaces ``messages``. Deleting an enquiry
    is a soft delete: the item stays with ``status=cancelled``.
    """

    def __init__(self, *args: Any, messages_ttl: float = ENQUIRY_MESSAGES_TTL, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._messages: ResourceStore[Message] = ResourceStore()
        self._message_cache: QueryCache[Message] = QueryCache(messages_ttl, self._clock)
        self._message_tickets = itertools.count(1)
        self._latest_message_ticket = 0

    # ------------------------------------------------------------------
    # Message state
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages.items

    @property
    def messages_error(self) -> str | None:
        return self._messages.error

    @property
    def messages_loading(self) -> bool:
        return self._messages.loading

    @property
    def messages_pagination(self) -> PaginationDescriptor | None:
        return self._messages.pagination

    @property
    def message_cache(self) -> QueryCache[Message]:
        return self._message_cache

    @property
    def total_unread_count(self) -> int:
        return sum(unread_count(enquiry) for enquiry in self.items)

    def subscribe_messages(self, listener: StoreListener) -> Callable[[], None]:
        return self._messages.subscribe(listener)

    # ------------------------------------------------------------------
    # Enquiry operations
    # ------------------------------------------------------------------

    async def cancel(self, identifier: Any) -> bool:
        return await self.delete(identifier)

    async def mark_as_read(self, identifier: Any) -> bool:
        response = await self.mutations.action(
            "mark as read",
            "POST",
            self.definition.detail_path(identifier, MARK_AS_READ),
            {},
        )
        if response is None:
            return False
        self._messages.replace_list(
            [{**message, "is_read": True} for message in self._messages.items],
            self._messages.pagination,
        )
        self._store.update(identifier, _mark_read)
        return True

    # ------------------------------------------------------------------
    # Message thread
    # ------------------------------------------------------------------

    async def fetch_messages(self, enquiry_id: Any, use_cache: bool = True) -> tuple[Message, ...] | None:
        """Load the thread of *enquiry_id*; ``None`` on failure or when superseded."""
        ticket = self._take_message_ticket()
        path = self.definition.detail_path(enquiry_id, MESSAGES)
        signature = self._message_cache.signature({}, path)
        if use_cache:
            entry = self._message_cache.get(signature)
            if entry is not None:
                self._log.debug("query.cache_hit", endpoint=path, signature=signature)
                self._messages.replace_list(entry.data, entry.pagination)
                return entry.data

        self._messages.begin()
        try:
            response = await self._gateway.get(path)
        except BaseException:
            self._messages.settle()
            raise
        if ticket != self._latest_message_ticket:
            self._log.info(
                "query.stale_response_discarded",
                endpoint=path,
                ticket=ticket,
                latest=self._latest_message_ticket,
            )
            self._messages.settle()
            return None

        message = None
        if not response.success:
            message = response.error or f"Failed to fetch messages for enquiry {enquiry_id}"
        else:
            try:
                result = paginated_envelope(response.data)
            except EnvelopeError as exc:
                message = exc.message
        if message is not None:
            self._log.warning("query.fetch_failed", endpoint=path, status=response.status, error=message)
            self._messages.clear_list()
            self._messages.fail(message)
            return None

        self._message_cache.put(signature, result.items, result.pagination)
        self._messages.replace_list(result.items, result.pagination)
        self._messages.succeed()
        return result.items

    async def send_message(self, enquiry_id: Any, content: str) -> Message | None:
        """Post to the thread; a ``pending`` enquiry moves to ``in_progress``."""
        path = self.definition.detail_path(enquiry_id, MESSAGES)
        self._messages.begin()
        try:
            response = await self._gateway.call("POST", path, {"content": content})
        except BaseException:
            self._messages.settle()
            raise
        if not response.success:
            error = response.error or "Failed to send message"
            self._log.warning("mutation.failed", operation="send message", endpoint=path, error=error)
            self._messages.fail(error)
            return None

        sent: Message = response.data if isinstance(response.data, Mapping) else {"content": content}
        pagination = self._messages.pagination
        self._messages.replace_list(
            [*self._messages.items, sent],
            pagination.with_count(pagination.count + 1) if pagination is not None else None,
        )
        now = self._clock.now().isoformat()
        self._store.update(enquiry_id, lambda enquiry: _with_message(enquiry, sent, now))
        self._take_message_ticket()
        self._message_cache.invalidate(self._message_cache.signature({}, path))
        invalidated = self._cache.clear()
        self._log.info("mutation.succeeded", operation="send message", endpoint=path, invalidated=invalidated)
        self._messages.succeed()
        return sent

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def clear_messages_error(self) -> None:
        self._messages.clear_error()

    def clear_cache(self) -> int:
        return super().clear_cache() + self._message_cache.clear()

    def reset_messages_state(self) -> None:
        self._take_message_ticket()
        self._messages.reset()
        self._message_cache.clear()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _take_message_ticket(self) -> int:
        self._latest_message_ticket = next(self._message_tickets)
        return self._latest_message_ticket


def _mark_read(enquiry: Enquiry) -> Enquiry:
    thread = [{**message, "is_read": True} for message in enquiry.get("messages") or []]
    return {**enquiry, "messages": thread, "unread_count": 0}


def _with_message(enquiry: Enquiry, message: Message, timestamp: str) -> Enquiry:
    status = enquiry.get("status")
    return {
        **enquiry,
        "status": EnquiryStatus.IN_PROGRESS.value if status == EnquiryStatus.PENDING else status,
        "messages": [*(enquiry.get("messages") or []), message],
        "updated_at": timestamp,
    }
