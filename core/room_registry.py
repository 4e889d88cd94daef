"""
Room Registry：管理 Room 的生命週期

職責：
1. 建立 Room（含 Host 成員）
2. 透過房間代碼查詢 Room
3. 加入房間（含斷線重連）

原則：
- 單一職責：只管「有哪些房間、誰在裡面」，不管階段流程（交給 RoomStateMachine）
- 房間活到程序結束，沒有刪除操作
"""
from typing import Dict, Optional, Tuple
import logging
import threading

from models import Room, Member
from core.locks import room_lock
from core.exceptions import RoomNotFound, RoomCodeExhausted
from services.naming_service import (
    generate_room_code,
    generate_member_id,
    generate_display_name,
    normalize_room_code,
)
from services.text_service import clip_text

logger = logging.getLogger(__name__)


class RoomRegistry:
    """房間代碼 → Room 的記憶體對照表"""

    def __init__(
        self,
        code_length: int = 4,
        code_alphabet: Optional[str] = None,
        max_code_attempts: int = 1000,
        display_name_max_length: int = 24,
    ):
        self.code_length = code_length
        self.code_alphabet = code_alphabet
        self.max_code_attempts = max_code_attempts
        self.display_name_max_length = display_name_max_length
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def _new_code(self) -> str:
        if self.code_alphabet:
            return generate_room_code(self.code_length, self.code_alphabet)
        return generate_room_code(self.code_length)

    def _display_name(self, room: Room, display_name: Optional[str]) -> str:
        name = clip_text(display_name, self.display_name_max_length)
        return name or generate_display_name(room)

    def create_room(self, host_display_name: Optional[str], host_id: Optional[str] = None) -> Tuple[Room, Member]:
        """
        建立新房間（含 Host 成員）

        流程：
        1. 生成唯一的房間代碼（碰撞就重新生成）
        2. 建立 Room（lobby 階段）
        3. 建立 Host 成員

        注意：
            - 產生代碼到放進 dict 都在 registry lock 之內，兩個請求不會拿到同一個代碼
            - 重試 max_code_attempts 次都碰撞就放棄

        異常：
            RoomCodeExhausted: 代碼空間幾乎用完
        """
        member_id = host_id or generate_member_id()

        with self._lock:
            # 1. 生成唯一的房間代碼
            code = self._new_code()
            attempts = 1
            while code in self._rooms:
                if attempts >= self.max_code_attempts:
                    raise RoomCodeExhausted(
                        f"No free room code after {attempts} attempts"
                    )
                code = self._new_code()
                attempts += 1
                logger.warning(f"Room code collision detected, regenerating: {code}")

            # 2. 建立 Room
            room = Room(code=code, host_id=member_id)

            # 3. 建立 Host
            host = Member(id=member_id, display_name=self._display_name(room, host_display_name))
            room.members[host.id] = host
            self._rooms[code] = room

        logger.info(f"Created room {code} hosted by {host.id} ({host.display_name})")
        return room, host

    def get_room(self, code: str) -> Room:
        """
        透過房間代碼取得 Room（不分大小寫）

        異常：
            RoomNotFound: Room 不存在
        """
        normalized = normalize_room_code(code)
        room = self._rooms.get(normalized)
        if room is None:
            raise RoomNotFound(normalized)
        return room

    def join_room(self, code: str, display_name: Optional[str], member_id: Optional[str] = None) -> Tuple[Room, Member]:
        """
        加入房間

        - 已經在房間裡的 member_id：視為重連，只更新顯示名稱（空白名稱就沿用舊的）
        - 新的 member_id：加到成員列表最後面，不論目前是哪個階段

        異常：
            RoomNotFound: Room 不存在
        """
        room = self.get_room(code)

        with room_lock(room):
            existing = room.members.get(member_id) if member_id else None
            if existing is not None:
                name = clip_text(display_name, self.display_name_max_length)
                if name and name != existing.display_name:
                    existing.display_name = name
                    room.bump_version()
                logger.info(f"Member {existing.id} rejoined room {room.code}")
                return room, existing

            member = Member(
                id=member_id or generate_member_id(),
                display_name=self._display_name(room, display_name),
            )
            room.members[member.id] = member
            room.bump_version()

        logger.info(
            f"Member {member.id} ({member.display_name}) joined room {room.code} "
            f"during {room.phase.value}"
        )
        return room, member

    def room_count(self) -> int:
        return len(self._rooms)
