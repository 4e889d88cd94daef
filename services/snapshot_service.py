"""
Snapshot 服務：把 Room 轉成對外的 JSON 結構

可見性規則：
- 技的內容：voting / result 階段才公開（所有人都提交前不能偷看）
- 投給誰：result 階段才公開
- 計票結果：只有 result 階段才有

呼叫者要先拿 room lock，避免讀到一半被改
"""
from typing import Any, Dict

from models import Room, Member, RoomPhase
from schemas import MemberView, PostResponse

SUBMISSION_VISIBLE_PHASES = {RoomPhase.VOTING, RoomPhase.RESULT}


def member_view(room: Room, member: Member) -> MemberView:
    return MemberView(
        id=member.id,
        display_name=member.display_name,
        is_host=member.id == room.host_id,
        has_submitted=member.has_submitted,
        has_voted=member.has_voted,
        submission=member.submission if room.phase in SUBMISSION_VISIBLE_PHASES else None,
        vote_target=member.vote_target if room.phase == RoomPhase.RESULT else None,
    )


def room_snapshot(room: Room) -> Dict[str, Any]:
    """
    產生 snapshot 欄位

    返回 dict 而不是 model，讓各 endpoint 加上自己的欄位：
        VoteResponse(**room_snapshot(room), all_voted=True)
    """
    is_result = room.phase == RoomPhase.RESULT
    return {
        "room_code": room.code,
        "host_id": room.host_id,
        "phase": room.phase,
        "version": room.version,
        "created_at": room.created_at,
        "members": [member_view(room, m) for m in room.members.values()],
        "result_summary": room.result_summary if is_result else None,
        "winner_ids": list(room.winner_ids) if is_result and room.winner_ids is not None else None,
        "vote_counts": dict(room.vote_counts) if is_result and room.vote_counts is not None else None,
    }


def post_view(post, caller_id=None) -> PostResponse:
    return PostResponse(
        id=post.id,
        author_name=post.author_name,
        title=post.title,
        text=post.text,
        created_at=post.created_at,
        like_count=post.like_count,
        liked=post.is_liked_by(caller_id),
    )
