"""
Forum Service - Forum and comment management.
"""

from typing import Any, Sequence

from loguru import logger
from sqlalchemy import Row, case, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.forum import Comment, Forum
from app.models.user import User


def _avatar_or_default(label: str) -> Any:
    """Avatar column falling back to the default when the user is missing."""
    return case(
        (User.id.is_(None), settings.forum_default_avatar),
        else_=User.avatar,
    ).label(label)


class ForumService:
    """
    Service for managing forums and their comments.

    Usage:
        forum = ForumService(db_session)
        rows = await forum.list_forums()
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize forum service with database session."""
        self.db = db

    # ==================== Forums ====================

    def _comment_counts(self) -> Any:
        return (
            select(
                Comment.topic_id.label("topic_id"),
                func.count(Comment.id).label("comments_count"),
            )
            .group_by(Comment.topic_id)
            .subquery()
        )

    def _enriched_forums(self) -> Any:
        """Forums joined with comment count and creator display data."""
        counts = self._comment_counts()
        return (
            select(
                Forum,
                func.coalesce(counts.c.comments_count, 0).label("comments_count"),
                User.name.label("created_by"),
                _avatar_or_default("creator_avatar"),
            )
            .outerjoin(counts, counts.c.topic_id == Forum.id)
            .outerjoin(User, User.id == Forum.user_id)
        )

    async def list_forums(self) -> Sequence[Row]:
        """
        Get all forums, newest first.

        Returns:
            Rows of (Forum, comments_count, created_by, creator_avatar)
        """
        query = self._enriched_forums().order_by(Forum.id.desc())
        result = await self.db.execute(query)
        return result.all()

    async def list_user_forums(self, user_id: int) -> Sequence[Row]:
        """
        Get forums created by a user, newest first.

        Returns:
            Rows of (Forum, comments_count)
        """
        counts = self._comment_counts()
        query = (
            select(
                Forum,
                func.coalesce(counts.c.comments_count, 0).label("comments_count"),
            )
            .outerjoin(counts, counts.c.topic_id == Forum.id)
            .where(Forum.user_id == user_id)
            .order_by(Forum.id.desc())
        )
        result = await self.db.execute(query)
        return result.all()

    async def get_forum(self, forum_id: int) -> Row | None:
        """Get one forum with comment count and creator info."""
        query = self._enriched_forums().where(Forum.id == forum_id)
        result = await self.db.execute(query)
        return result.one_or_none()

    async def create_forum(
        self,
        user_id: int,
        title: str,
        description: str | None = None,
    ) -> Forum:
        """
        Create new forum.

        Args:
            user_id: Creator user ID
            title: Forum title
            description: Forum description

        Returns:
            Created forum
        """
        forum = Forum(user_id=user_id, title=title, description=description)
        self.db.add(forum)
        await self.db.commit()
        await self.db.refresh(forum)

        logger.info(f"Forum {forum.id} created by user {user_id}")
        return forum

    async def update_forum(self, forum_id: int, **fields: Any) -> Forum | None:
        """
        Update forum title and/or description.

        Only the keys passed are assigned; a missing key leaves the
        stored value untouched.
        """
        forum = await self.db.get(Forum, forum_id)
        if not forum:
            return None

        for name in ("title", "description"):
            if name in fields:
                setattr(forum, name, fields[name])
        await self.db.commit()
        await self.db.refresh(forum)
        return forum

    async def update_status(self, forum_id: int, status: str) -> Forum | None:
        """Set forum status flag."""
        forum = await self.db.get(Forum, forum_id)
        if not forum:
            return None

        forum.status = status
        await self.db.commit()
        await self.db.refresh(forum)
        return forum

    async def delete_forum(self, forum_id: int) -> int:
        """
        Delete forum and all of its comments.

        Missing forums are not an error; any comments still pointing
        at the id are removed either way.

        Returns:
            Number of comments removed
        """
        await self.db.execute(delete(Forum).where(Forum.id == forum_id))
        result = await self.db.execute(
            delete(Comment).where(Comment.topic_id == forum_id)
        )
        await self.db.commit()

        logger.info(f"Forum {forum_id} deleted with {result.rowcount} comments")
        return result.rowcount

    # ==================== Comments ====================

    async def list_comments(self, topic_id: int) -> Sequence[Row]:
        """
        Get comments in forum in creation order.

        Returns:
            Rows of (Comment, authorName, authorAvatar)
        """
        query = (
            select(
                Comment,
                User.name.label("authorName"),
                _avatar_or_default("authorAvatar"),
            )
            .outerjoin(User, User.id == Comment.user_id)
            .where(Comment.topic_id == topic_id)
            .order_by(Comment.id)
        )
        result = await self.db.execute(query)
        return result.all()

    async def create_comment(
        self,
        user_id: int,
        topic_id: int,
        comment: str,
        parent_comment: int | None = None,
    ) -> Comment:
        """
        Create new comment in forum.

        Args:
            user_id: Author user ID
            topic_id: Forum ID
            comment: Comment text
            parent_comment: Parent comment ID for replies

        Returns:
            Created comment
        """
        new_comment = Comment(
            user_id=user_id,
            topic_id=topic_id,
            comment=comment,
            parent_comment=parent_comment,
        )
        self.db.add(new_comment)
        await self.db.commit()
        await self.db.refresh(new_comment)
        return new_comment

    async def update_comment(self, comment_id: int, comment: str) -> Comment | None:
        """Replace comment text."""
        existing = await self.db.get(Comment, comment_id)
        if not existing:
            return None

        existing.comment = comment
        await self.db.commit()
        await self.db.refresh(existing)
        return existing

    async def delete_comment(self, comment_id: int) -> bool:
        """Delete a single comment. Replies to it are left in place."""
        result = await self.db.execute(delete(Comment).where(Comment.id == comment_id))
        await self.db.commit()
        return result.rowcount > 0
