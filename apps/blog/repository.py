"""
Blog post persistence

CRUD primitives for BlogPost rows. Update and delete are issued as single
statements keyed on the id, never as a read followed by a write, so a
concurrent reader sees either the old or the new row and requests touching
different posts do not block each other.

Usage:
    repo = PostRepository(db)
    post = repo.insert(validate_for_create(payload))
    repo.update(post.id, {"title": "New title"})
    repo.delete_by_id(post.id)
"""

import logging
from typing import Any, Iterable, Optional, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from apps.blog.models import BlogPost, generate_post_id, utcnow
from apps.blog.schemas import PostCreate, validate_for_create
from apps.shared.errors import NotFoundError, ServiceError, StorageError

logger = logging.getLogger(__name__)


class PostRepository:
    """Persistence adapter for blog posts bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, context: str) -> StorageError:
        self.db.rollback()
        return StorageError(f"{context} failed")

    def insert(self, draft: PostCreate) -> BlogPost:
        """Assign id and created, persist the draft and return the stored post."""
        post = BlogPost(
            id=generate_post_id(),
            title=draft.title,
            content=draft.content,
            author=draft.author.model_dump(),
            created=utcnow(),
        )
        try:
            self.db.add(post)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Insert post") from exc
        self.db.refresh(post)
        logger.info("Created post %s by %s", post.id, post.author_name)
        return post

    def insert_batch(self, drafts: Iterable[Union[PostCreate, dict]]) -> list[BlogPost]:
        """
        Insert several drafts, each in its own transaction.

        Items succeed or fail independently: a draft that does not validate or
        cannot be stored is logged and skipped, and never leaves a partial row.
        Raw dicts are validated first.

        Returns:
            The posts that were stored, in input order
        """
        inserted = []
        for index, draft in enumerate(drafts):
            try:
                if not isinstance(draft, PostCreate):
                    draft = validate_for_create(draft)
                inserted.append(self.insert(draft))
            except ServiceError as exc:
                logger.warning("Skipping batch item %d: %s", index, exc.message)
        return inserted

    def find_all(self) -> list[BlogPost]:
        """Return every stored post, oldest first."""
        try:
            stmt = select(BlogPost).order_by(BlogPost.created.asc(), BlogPost.id.asc())
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise self._fail("List posts") from exc

    def find_by_id(self, post_id: str) -> Optional[BlogPost]:
        """Return the post, or None if no live post has this id."""
        try:
            return self.db.get(BlogPost, post_id)
        except SQLAlchemyError as exc:
            raise self._fail("Fetch post") from exc

    def get(self, post_id: str) -> BlogPost:
        post = self.find_by_id(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    def count(self) -> int:
        try:
            return self.db.scalar(select(func.count()).select_from(BlogPost))
        except SQLAlchemyError as exc:
            raise self._fail("Count posts") from exc

    def update(self, post_id: str, patch: dict[str, Any]) -> Optional[BlogPost]:
        """
        Apply the fields present in patch to one post atomically.

        Only title, content and author are written; author replaces the stored
        sub-object as a whole. id and created are never touched.

        Returns:
            The updated post, or None if no post has this id
        """
        values = {k: v for k, v in patch.items() if k in BlogPost.MUTABLE_FIELDS}
        if not values:
            return self.find_by_id(post_id)

        stmt = (
            update(BlogPost)
            .where(BlogPost.id == post_id)
            .values(**values)
            .returning(BlogPost)
        )
        try:
            post = self.db.scalars(stmt).one_or_none()
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Update post") from exc

        if post is None:
            return None
        logger.info("Updated post %s (%s)", post_id, ", ".join(sorted(values)))
        return post

    def delete_by_id(self, post_id: str) -> bool:
        """
        Remove one post.

        Returns:
            True if a post was removed, False if there was nothing to remove
        """
        stmt = delete(BlogPost).where(BlogPost.id == post_id)
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Delete post") from exc

        removed = result.rowcount > 0
        if removed:
            logger.info("Deleted post %s", post_id)
        return removed
