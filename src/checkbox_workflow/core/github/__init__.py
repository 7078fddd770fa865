"""GitHub gateway (comments and issue bodies)."""
from __future__ import annotations

from .client import CommentGateway, GitHubClient, next_page_url, parse_repository
from .models import Comment, Issue, Repository

__all__ = [
    "CommentGateway",
    "GitHubClient",
    "next_page_url",
    "parse_repository",
    "Comment",
    "Issue",
    "Repository",
]
