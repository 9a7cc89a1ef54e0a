"""
Forum Module - Community discussions.

Features:
- Forums with comment counts and creator info
- Comments with one level of replies
- Cascade delete of comments with their forum
"""

from app.modules.forum.service import ForumService

__all__ = ["ForumService"]
