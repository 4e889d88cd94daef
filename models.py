"""
資料模型（全部存在記憶體中，程序結束就消失）

- Room / Member：房間與成員
- Post：技 SNS 的投稿
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Set
import threading


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoomPhase(str, Enum):
    LOBBY = "lobby"
    BUILDING = "building"
    VOTING = "voting"
    RESULT = "result"


@dataclass
class Member:
    id: str
    display_name: str
    joined_at: datetime = field(default_factory=utcnow)
    submission: Optional[str] = None
    submitted_at: Optional[datetime] = None
    vote_target: Optional[str] = None
    voted_at: Optional[datetime] = None

    @property
    def has_submitted(self) -> bool:
        return self.submission is not None

    @property
    def has_voted(self) -> bool:
        return self.vote_target is not None

    def clear_round(self) -> None:
        self.submission = None
        self.submitted_at = None
        self.clear_vote()

    def clear_vote(self) -> None:
        self.vote_target = None
        self.voted_at = None


@dataclass
class Room:
    code: str
    host_id: str
    created_at: datetime = field(default_factory=utcnow)
    phase: RoomPhase = RoomPhase.LOBBY
    # dict 保留插入順序 = 加入順序
    members: Dict[str, Member] = field(default_factory=dict)
    result_summary: Optional[str] = None
    winner_ids: Optional[List[str]] = None
    vote_counts: Optional[Dict[str, int]] = None
    version: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def bump_version(self) -> int:
        self.version += 1
        return self.version

    def clear_result(self) -> None:
        self.result_summary = None
        self.winner_ids = None
        self.vote_counts = None


@dataclass
class Post:
    id: str
    author_name: str
    title: str
    text: str
    created_at: datetime = field(default_factory=utcnow)
    liked_by: Set[str] = field(default_factory=set, repr=False)

    @property
    def like_count(self) -> int:
        return len(self.liked_by)

    def is_liked_by(self, caller_id: Optional[str]) -> bool:
        return caller_id is not None and caller_id in self.liked_by
