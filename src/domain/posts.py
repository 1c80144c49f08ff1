"""
Post board - Authenticated users share short posts.
"""

from dataclasses import dataclass

from .exceptions import ValidationError
from .models import AuthenticatedPrincipal, Post
from .ports import PostRepository


@dataclass
class PostBoard:
    """Creates and lists posts on behalf of authenticated principals."""

    repository: PostRepository

    def create(self, principal: AuthenticatedPrincipal, topic: str, thought: str) -> Post:
        topic = (topic or "").strip()
        thought = (thought or "").strip()
        missing = [name for name, value in (("topic", topic), ("thought", thought)) if not value]
        if missing:
            raise ValidationError(missing)
        return self.repository.add(principal.id, topic, thought)

    def list_all(self) -> list[Post]:
        """All posts, newest first."""
        return self.repository.list_recent()

    def list_for(self, principal: AuthenticatedPrincipal) -> list[Post]:
        """The principal's own posts, newest first."""
        return self.repository.list_by_user(principal.id)
