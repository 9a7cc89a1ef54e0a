"""
Forum API Endpoints.

Forums, comments and replies.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import get_current_user_id
from app.models.forum import Comment, Forum
from app.modules.forum.service import ForumService

router = APIRouter()


# ==================== Schemas ====================


class CreateForumRequest(BaseModel):
    """Create new forum."""

    title: str
    description: str | None = None


class UpdateForumRequest(BaseModel):
    """Update forum; the id travels in the body."""

    id: int
    title: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("title cannot be null")
        return v


class UpdateStatusRequest(BaseModel):
    """Update forum status."""

    status: str


class CreateCommentRequest(BaseModel):
    """Create top-level comment."""

    model_config = ConfigDict(populate_by_name=True)

    comment: str = Field(alias="c")
    topic_id: int


class UpdateCommentRequest(BaseModel):
    """Update comment text."""

    comment: str


class CreateReplyRequest(BaseModel):
    """Create reply, optionally to a parent comment."""

    comment: str
    topic_id: int
    parent_comment: int | None = None


# ==================== Helpers ====================


@contextmanager
def database_errors(detail: str, action: str) -> Iterator[None]:
    """Turn database failures into a 500 with the given detail."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Error {action}: {e}")
        raise HTTPException(status_code=500, detail=detail) from e


def _forum_payload(forum: Forum) -> dict[str, Any]:
    return {
        "id": forum.id,
        "title": forum.title,
        "description": forum.description,
        "user_id": forum.user_id,
        "status": forum.status,
        "created_at": forum.created_at.isoformat(),
        "updated_at": forum.updated_at.isoformat(),
    }


def _enriched_forum_payload(row: Row) -> dict[str, Any]:
    return {
        **_forum_payload(row.Forum),
        "comments_count": row.comments_count,
        "created_by": row.created_by,
        "creator_avatar": row.creator_avatar,
    }


def _comment_payload(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "comment": comment.comment,
        "topic_id": comment.topic_id,
        "parent_comment": comment.parent_comment,
        "user_id": comment.user_id,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
    }


# ==================== Forums ====================


@router.get("/forums")
async def list_forums(
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """
    Get all forums with comment counts and creator info.

    Only the derived fields (comments_count, created_by, creator_avatar)
    are returned; the joined comment and creator records are not embedded.
    """
    forum = ForumService(db)
    with database_errors("Server error", "fetching forums"):
        rows = await forum.list_forums()

    return [_enriched_forum_payload(row) for row in rows]


@router.get("/forum/user/{user_id}")
async def list_user_forums(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """Get forums created by a user."""
    forum = ForumService(db)
    with database_errors("Server error", f"fetching forums of user {user_id}"):
        rows = await forum.list_user_forums(user_id)

    return [
        {**_forum_payload(row.Forum), "comments_count": row.comments_count}
        for row in rows
    ]


@router.get("/forums/{forum_id}")
async def get_forum(
    forum_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get forum details."""
    forum = ForumService(db)
    with database_errors("Server error", f"fetching forum {forum_id}"):
        row = await forum.get_forum(forum_id)

    if not row:
        raise HTTPException(status_code=404, detail="Forum not found")

    return _enriched_forum_payload(row)


@router.put("/forum/status/{forum_id}")
async def update_forum_status(
    forum_id: int,
    request: UpdateStatusRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Update forum status."""
    forum = ForumService(db)
    with database_errors("Server error", f"updating status of forum {forum_id}"):
        updated = await forum.update_status(forum_id, request.status)

    if not updated:
        raise HTTPException(status_code=404, detail="Forum not found")

    return {"message": "Status updated", "forum": _forum_payload(updated)}


@router.post("/manageforum")
async def create_forum(
    request: CreateForumRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Create new forum owned by the current user."""
    forum = ForumService(db)
    with database_errors("Database Error", "creating forum"):
        created = await forum.create_forum(
            user_id=user_id,
            title=request.title,
            description=request.description,
        )

    return {"message": "Forum created", "forumId": created.id}


@router.put("/manageforum")
async def update_forum(
    request: UpdateForumRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Update the forum fields present in the body; others keep their values."""
    forum = ForumService(db)
    with database_errors("Database Error", f"updating forum {request.id}"):
        updated = await forum.update_forum(
            request.id,
            **request.model_dump(exclude_unset=True, exclude={"id"}),
        )

    if not updated:
        raise HTTPException(status_code=404, detail="Forum not found")

    return {"message": "Forum updated"}


@router.delete("/forum/{forum_id}")
async def delete_forum(
    forum_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Delete forum together with its comments."""
    forum = ForumService(db)
    with database_errors("Query Error", f"deleting forum {forum_id}"):
        await forum.delete_forum(forum_id)

    return {"message": "Forum deleted"}


# ==================== Comments ====================


@router.get("/forums/{forum_id}/comments")
async def list_comments(
    forum_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """Get comments in forum with author info."""
    forum = ForumService(db)
    with database_errors("Server error", f"fetching comments of forum {forum_id}"):
        rows = await forum.list_comments(forum_id)

    return [
        {
            **_comment_payload(row.Comment),
            "authorName": row.authorName,
            "authorAvatar": row.authorAvatar,
        }
        for row in rows
    ]


@router.post("/view_forum")
async def create_comment(
    request: CreateCommentRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Add top-level comment to forum."""
    forum = ForumService(db)
    with database_errors("Query Error", "creating comment"):
        comment = await forum.create_comment(
            user_id=user_id,
            topic_id=request.topic_id,
            comment=request.comment,
        )

    return _comment_payload(comment)


@router.put("/view_forum/{comment_id}")
async def update_comment(
    comment_id: int,
    request: UpdateCommentRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Update comment text."""
    forum = ForumService(db)
    with database_errors("Query Error", f"updating comment {comment_id}"):
        updated = await forum.update_comment(comment_id, request.comment)

    if not updated:
        raise HTTPException(status_code=404, detail="Comment not found")

    return {"message": "Comment updated"}


@router.post("/reply")
async def create_reply(
    request: CreateReplyRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Add reply to forum, optionally under a parent comment."""
    forum = ForumService(db)
    with database_errors("Query Error", "creating reply"):
        reply = await forum.create_comment(
            user_id=user_id,
            topic_id=request.topic_id,
            comment=request.comment,
            parent_comment=request.parent_comment,
        )

    return {"message": "Reply added", "commentId": reply.id}


@router.delete("/view_forum/{comment_id}")
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Delete a comment."""
    forum = ForumService(db)
    with database_errors("Query Error", f"deleting comment {comment_id}"):
        await forum.delete_comment(comment_id)

    return {"message": "Comment deleted"}
