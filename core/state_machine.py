"""
Room State Machine：集中管理所有狀態轉換

階段：
    lobby → building → voting → result
                ↑                   │
                └──── restart ──────┘

規則：
- 階段只會往前走，唯一的例外是房主的 restart（回到 building）
- 所有階段變更都經過 transition()，其他地方不直接改 room.phase
- 每個操作都在 room lock 之內完成整個 read-modify-write
"""
import logging

from models import Room, Member, RoomPhase, utcnow
from core.locks import room_lock
from core.exceptions import (
    InvalidInput,
    InvalidPhase,
    MemberNotFound,
    NotRoomHost,
)
from services.tally_service import tally, TIE_MODE_ALL
from services.text_service import clip_text

logger = logging.getLogger(__name__)

# building 出現在每個階段的目標裡，是因為 restart 可以從任何階段觸發
ALLOWED_TRANSITIONS = {
    RoomPhase.LOBBY: {RoomPhase.BUILDING},
    RoomPhase.BUILDING: {RoomPhase.VOTING, RoomPhase.BUILDING},
    RoomPhase.VOTING: {RoomPhase.RESULT, RoomPhase.BUILDING},
    RoomPhase.RESULT: {RoomPhase.BUILDING},
}


class RoomStateMachine:
    """單一房間的狀態機 + 提交 / 投票 / 計票流程"""

    def __init__(self, technique_max_length: int = 40, tie_mode: str = TIE_MODE_ALL):
        self.technique_max_length = technique_max_length
        self.tie_mode = tie_mode

    @staticmethod
    def transition(room: Room, target: RoomPhase) -> Room:
        """
        狀態轉換（唯一的入口）

        異常：
            InvalidPhase: 轉換不在 ALLOWED_TRANSITIONS 裡
        """
        with room_lock(room):
            current = room.phase
            if target not in ALLOWED_TRANSITIONS[current]:
                raise InvalidPhase(
                    f"Cannot move room {room.code} from {current.value} to {target.value}"
                )
            room.phase = target
            room.bump_version()
            logger.info(f"Room {room.code} phase {current.value} -> {target.value}")
            return room

    @staticmethod
    def _require_phase(room: Room, phase: RoomPhase, action: str) -> None:
        if room.phase != phase:
            raise InvalidPhase(
                f"Cannot {action} while room {room.code} is in {room.phase.value} phase"
            )

    @staticmethod
    def _require_member(room: Room, member_id: str) -> Member:
        member = room.members.get(member_id)
        if member is None:
            raise MemberNotFound(member_id, room.code)
        return member

    def restart(self, room: Room, caller_id: str) -> Room:
        """
        開始新的一輪（Host only）

        效果：
        - 階段設為 building
        - 清空結果
        - 清空每個成員的技與投票

        任何階段都可以呼叫

        異常：
            NotRoomHost: caller 不是房主
        """
        with room_lock(room):
            if caller_id != room.host_id:
                raise NotRoomHost(f"Only the host can restart room {room.code}")

            room.clear_result()
            for member in room.members.values():
                member.clear_round()
            self.transition(room, RoomPhase.BUILDING)

            logger.info(f"Room {room.code} restarted by host with {len(room.members)} members")
            return room

    def submit_technique(self, room: Room, member_id: str, text: str) -> bool:
        """
        提交技（building 階段）

        流程：
        1. 驗證階段、成員、內容
        2. 截斷並寫入
        3. 如果所有成員都提交了 → 進入 voting

        返回：
            這次提交是否剛好讓「所有人都提交」成立

        異常：
            InvalidPhase: 不是 building 階段
            MemberNotFound: 不是這個房間的成員
            InvalidInput: 去掉空白後是空字串
        """
        with room_lock(room):
            self._require_phase(room, RoomPhase.BUILDING, "submit a technique")
            member = self._require_member(room, member_id)

            technique = clip_text(text, self.technique_max_length)
            if not technique:
                raise InvalidInput("Technique text must not be empty")

            member.submission = technique
            member.submitted_at = utcnow()
            room.bump_version()
            logger.info(f"Member {member_id} submitted a technique in room {room.code}")

            # 以「檢查當下」的成員為準：中途加入的人也要提交
            if not all(m.has_submitted for m in room.members.values()):
                return False

            for m in room.members.values():
                m.clear_vote()
            self.transition(room, RoomPhase.VOTING)
            return True

    def cast_vote(self, room: Room, member_id: str, target_id: str) -> bool:
        """
        投票（voting 階段）

        - 不能投給自己
        - 計票前可以改票（覆蓋上一票）
        - 所有成員都投完 → 計票並進入 result

        返回：
            這一票是否剛好讓「所有人都投票」成立

        異常：
            InvalidPhase: 不是 voting 階段
            MemberNotFound: 投票者或目標不是成員
            InvalidInput: 投給自己
        """
        with room_lock(room):
            self._require_phase(room, RoomPhase.VOTING, "vote")
            voter = self._require_member(room, member_id)
            self._require_member(room, target_id)
            if member_id == target_id:
                raise InvalidInput("You cannot vote for yourself")

            voter.vote_target = target_id
            voter.voted_at = utcnow()
            room.bump_version()
            logger.info(f"Member {member_id} voted for {target_id} in room {room.code}")

            if not all(m.has_voted for m in room.members.values()):
                return False

            self._finalize(room)
            return True

    def _finalize(self, room: Room) -> None:
        result = tally(list(room.members.values()), self.tie_mode)
        room.vote_counts = result.counts
        room.winner_ids = result.winner_ids
        room.result_summary = result.summary
        self.transition(room, RoomPhase.RESULT)

        logger.info(
            f"Room {room.code} tallied: winners={result.winner_ids} max={result.max_count}"
        )
