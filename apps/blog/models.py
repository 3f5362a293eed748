"""
Blog database models.

A post is stored as a single row; the author sub-object lives in a JSON
document column so it is read and replaced as one value.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, String, Text, DateTime, JSON

from apps.shared.database import Base


# Column size of title; request schemas enforce the same limit
TITLE_MAX_LENGTH = 500


def generate_post_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BlogPost(Base):
    """
    Blog post record.

    - id: opaque identifier, assigned on insert and never changed
    - author: {"firstName": ..., "lastName": ...}
    - title / content: required text
    - created: set once on insert, never updated
    """
    __tablename__ = "blog_posts"

    id = Column(String(32), primary_key=True, default=generate_post_id)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    content = Column(Text, nullable=False)
    author = Column(JSON, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Fields the client may change through an update
    MUTABLE_FIELDS = ("title", "content", "author")

    @property
    def author_name(self) -> str:
        return f"{self.author['firstName']} {self.author['lastName']}".strip()

    def to_dict(self) -> dict:
        """Convert post to its wire representation."""
        created = self.created
        # SQLite hands timestamps back without tzinfo; they are stored as UTC
        if created is not None and created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "title": self.title,
            "author": {
                "firstName": self.author["firstName"],
                "lastName": self.author["lastName"],
            },
            "content": self.content,
            "created": created.isoformat() if created else None,
        }

    def __repr__(self) -> str:
        return f"<BlogPost id={self.id!r} title={self.title!r}>"
