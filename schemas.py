"""
API 的 Request / Response 格式（pydantic）

- JSON 一律用 camelCase（alias），Python 端用 snake_case
- Request 不接受多餘欄位（extra="forbid"），寫錯欄位名會直接 400，
  不會默默變成匿名提交
"""
from datetime import datetime
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models import RoomPhase

IdentifierStr = Annotated[str, Field(min_length=1, max_length=64)]


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============ Rooms ============

class RoomEnter(RequestModel):
    """建立 / 加入房間"""
    caller_id: Optional[IdentifierStr] = None
    display_name: Optional[str] = None


class RoomRestart(RequestModel):
    caller_id: IdentifierStr


class TechniqueSubmit(RequestModel):
    caller_id: IdentifierStr
    text: str


class VoteSubmit(RequestModel):
    caller_id: IdentifierStr
    target_id: IdentifierStr


class MemberView(ResponseModel):
    id: str
    display_name: str
    is_host: bool
    has_submitted: bool
    has_voted: bool
    # voting / result 階段才公開
    submission: Optional[str] = None
    # result 階段才公開
    vote_target: Optional[str] = None


class RoomSnapshot(ResponseModel):
    room_code: str
    host_id: str
    phase: RoomPhase
    version: int
    created_at: datetime
    members: List[MemberView]
    result_summary: Optional[str] = None
    winner_ids: Optional[List[str]] = None
    vote_counts: Optional[Dict[str, int]] = None


class RoomEnterResponse(RoomSnapshot):
    member_id: str


class TechniqueResponse(RoomSnapshot):
    all_submitted: bool


class VoteResponse(RoomSnapshot):
    all_voted: bool


# ============ Posts ============

class PostCreate(RequestModel):
    author_name: Optional[str] = None
    title: Optional[str] = None
    text: str


class PostLike(RequestModel):
    caller_id: IdentifierStr


class PostResponse(ResponseModel):
    id: str
    author_name: str
    title: str
    text: str
    created_at: datetime
    like_count: int
    liked: bool = False


class LikeResponse(ResponseModel):
    post_id: str
    like_count: int
    liked: bool


class HealthResponse(ResponseModel):
    ok: bool
    room_count: int
    post_count: int
