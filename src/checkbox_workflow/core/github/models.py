"""GitHub REST resource models (only the fields this tool reads)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class Repository:
    """``owner/name`` pair identifying a repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class Comment:
    """An issue or pull request comment."""

    id: int
    body: str
    html_url: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Comment:
        return cls(
            id=int(data["id"]),
            body=data.get("body") or "",
            html_url=data.get("html_url") or "",
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at") or "",
        )


@dataclass(frozen=True, slots=True)
class Issue:
    """An issue or pull request (pull requests are issues in the REST API)."""

    number: int
    body: Optional[str]
    html_url: str = ""
    updated_at: str = ""
    created_at: str = ""
    title: str = ""
    state: str = "open"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Issue:
        return cls(
            number=int(data["number"]),
            body=data.get("body"),
            html_url=data.get("html_url") or "",
            updated_at=data.get("updated_at") or "",
            created_at=data.get("created_at") or "",
            title=data.get("title") or "",
            state=data.get("state") or "open",
        )


__all__ = ["Repository", "Comment", "Issue"]
