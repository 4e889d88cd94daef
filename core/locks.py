"""
並發控制工具

FastAPI 的同步 endpoint 跑在 thread pool 上，所以同一個房間可能同時收到多個請求。
「檢查是否所有人都提交了 → 轉換階段」是典型的 read-modify-write，
必須在同一把鎖之內完成，否則兩個人同時提交會各自觸發一次轉換。

每個 Room 自帶一把 RLock（可重入），不同房間之間互不影響。
"""
from contextlib import contextmanager
from typing import Iterator

from models import Room


@contextmanager
def room_lock(room: Room) -> Iterator[Room]:
    """
    鎖定一個 Room

    使用場景：
    - 修改 Room 狀態時
    - 讀取 Room 並產生 snapshot 時（避免讀到一半被改）

    範例：
        with room_lock(room):
            RoomStateMachine.transition(room, RoomPhase.VOTING)

    注意：
        - RLock 可重入，State Machine 內部再鎖一次不會 deadlock
        - 鎖住期間不要做 I/O
    """
    with room.lock:
        yield room
