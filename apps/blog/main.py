"""
Blog API

CRUD endpoints for blog posts.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from apps.blog.repository import PostRepository
from apps.blog.schemas import validate_for_create, validate_for_update
from apps.shared.config import Settings, get_settings
from apps.shared.cors import setup_cors
from apps.shared.database import Database, get_database, get_db
from apps.shared.errors import ConflictError, NotFoundError, register_exception_handlers
from apps.shared.security_headers import build_security_headers, setup_security_headers

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def get_repository(db: Session = Depends(get_db)) -> PostRepository:
    return PostRepository(db)


@router.get("/health")
def health(database: Database = Depends(get_database)):
    """Health check endpoint - returns service status and database connectivity"""
    db_connected = database.check_connection()
    return {
        "status": "ok" if db_connected else "degraded",
        "service": "blog",
        "database": "connected" if db_connected else "disconnected",
    }


@router.get("")
def list_posts(repo: PostRepository = Depends(get_repository)):
    """List all posts. An empty store is an empty list, not an error."""
    return {"blogPost": [post.to_dict() for post in repo.find_all()]}


@router.get("/{post_id}")
def get_post(post_id: str, repo: PostRepository = Depends(get_repository)):
    """Get a single post by id."""
    return repo.get(post_id).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    payload: Any = Body(...),
    repo: PostRepository = Depends(get_repository),
):
    """
    Create a new post.

    Body: {"title": ..., "content": ..., "author": {"firstName": ..., "lastName": ...}}
    id and created are assigned by the server.
    """
    draft = validate_for_create(payload)
    return repo.insert(draft).to_dict()


@router.put("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_post(
    post_id: str,
    payload: Any = Body(...),
    repo: PostRepository = Depends(get_repository),
):
    """
    Update the fields that are sent.

    A body id, when present, must match the path id. An author replaces the
    stored author as a whole.
    """
    if isinstance(payload, dict) and payload.get("id") is not None:
        body_id = str(payload["id"])
        if body_id != post_id:
            raise ConflictError(
                f"Request path id ({post_id}) and request body id ({body_id}) must match"
            )

    patch = validate_for_update(payload)
    if repo.update(post_id, patch) is None:
        raise NotFoundError(f"Post {post_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: str, repo: PostRepository = Depends(get_repository)):
    """Delete a post."""
    if not repo.delete_by_id(post_id):
        raise NotFoundError(f"Post {post_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(
    database: Optional[Database] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the blog application.

    The store is connected before the app starts serving and its connections
    are closed once the server has stopped accepting requests.
    """
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await run_in_threadpool(database.init)
        try:
            yield
        finally:
            await run_in_threadpool(database.dispose)

    app = FastAPI(
        title="Blog Service",
        version="1.0.0",
        description="Create, read, update and delete blog posts",
        lifespan=lifespan,
    )
    app.state.database = database

    setup_cors(app, settings)
    setup_security_headers(app, settings)
    register_exception_handlers(app, headers=build_security_headers(settings))

    app.include_router(router)
    return app
