"""Application-layer read models for the Tickets bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field

from tickets.domain.aggregates import Comment, Ticket


@dataclass(frozen=True)
class TicketPage:
    """One page of a filtered ticket listing."""

    items: list[Ticket]
    total: int
    page: int
    page_size: int


@dataclass
class CommentThread:
    """A top-level comment and its replies, oldest first."""

    comment: Comment
    replies: list[Comment] = field(default_factory=list)

    @classmethod
    def build_all(cls, comments: list[Comment]) -> list[CommentThread]:
        """Group a flat, creation-ordered list into threads.

        Replies whose parent is missing are dropped.
        """
        threads: dict[str, CommentThread] = {}
        for comment in comments:
            if comment.parent_id is None:
                threads[comment.id.value] = cls(comment=comment)
        for comment in comments:
            if comment.parent_id is not None:
                thread = threads.get(comment.parent_id.value)
                if thread is not None:
                    thread.replies.append(comment)
        return list(threads.values())
