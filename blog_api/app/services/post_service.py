"""
Service layer for blog posts.

``PostService`` wraps a ``PostStore`` handle and implements the list,
read, create, update and delete operations used by the posts router.
Ids are checked for format before touching the store so malformed ids
are reported as client errors rather than as missing records.
"""

from __future__ import annotations

import logging

from blog_api.app.core.db import PostStore, is_valid_post_id
from blog_api.app.core.errors import InvalidIdError, NotFoundError, ValidationError
from blog_api.app.schemas.post import PostCreate, PostList, PostRead, PostUpdate

logger = logging.getLogger(__name__)


class PostService:
    """Business logic for the posts collection."""

    def __init__(self, store: PostStore) -> None:
        self.store = store

    @staticmethod
    def _check_id(post_id: str) -> None:
        if not is_valid_post_id(post_id):
            raise InvalidIdError(post_id)

    async def list_posts(self) -> PostList:
        docs = self.store.find_all()
        return PostList(posts=[PostRead.from_document(doc) for doc in docs])

    async def get_post(self, post_id: str) -> PostRead:
        self._check_id(post_id)
        doc = self.store.find_by_id(post_id)
        if doc is None:
            raise NotFoundError(post_id)
        return PostRead.from_document(doc)

    async def create_post(self, data: PostCreate) -> PostRead:
        """Insert a new post and return its view."""
        doc = self.store.insert_one(data.to_document())
        logger.info("Created post %s '%s'", doc["id"], doc["title"])
        return PostRead.from_document(doc)

    async def update_post(self, post_id: str, data: PostUpdate) -> PostRead:
        """Apply a partial update to an existing post.

        Only the fields present in ``data`` are written; everything else
        on the stored post is left untouched.  Raises ``ValidationError``
        when the body id disagrees with ``post_id`` or carries no fields,
        and ``NotFoundError`` when the post does not exist.
        """
        self._check_id(post_id)
        if data.id is not None and data.id != post_id:
            raise ValidationError(
                f"Request path id ({post_id}) and request body id ({data.id}) must match"
            )
        changes = data.changes()
        if not changes:
            raise ValidationError("Request body must contain at least one of: author, title, content")
        doc = self.store.update_one(post_id, changes)
        if doc is None:
            raise NotFoundError(post_id)
        logger.info("Updated post %s fields %s", post_id, sorted(changes))
        return PostRead.from_document(doc)

    async def delete_post(self, post_id: str) -> None:
        """Delete a post.  Deleting a post that does not exist is a no‑op."""
        self._check_id(post_id)
        if self.store.delete_one(post_id):
            logger.info("Deleted post %s", post_id)
        else:
            logger.info("Delete of unknown post %s ignored", post_id)
