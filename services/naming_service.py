"""
命名服務：生成 Room Code、成員 ID 和預設顯示名稱

純計算邏輯，不涉及狀態轉換
"""
import random
import string
import uuid

from models import Room

ANIMALS = ["Fox", "Eagle", "Bear", "Tiger", "Wolf", "Deer", "Leopard", "Lion", "Rabbit", "Snake"]


def generate_room_code(length: int = 4, alphabet: str = string.ascii_uppercase + string.digits) -> str:
    """
    生成隨機的房間代碼

    範例：K7QZ, 4821

    注意：
    - 不檢查唯一性（由呼叫者負責）
    - 預設 36^4 = 1,679,616 種可能
    """
    return ''.join(random.choices(alphabet, k=length))


def normalize_room_code(code: str) -> str:
    """房間代碼不分大小寫，前後空白也忽略"""
    return code.strip().upper()


def generate_member_id() -> str:
    return uuid.uuid4().hex


def generate_post_id() -> str:
    return uuid.uuid4().hex


def generate_display_name(room: Room) -> str:
    """
    為房間內沒有填名字的新成員生成顯示名稱

    格式：「動物 N」
    範例：Fox 1, Eagle 1, Bear 1, ..., Fox 2, Eagle 2, ...

    邏輯：
    - 有 10 種動物
    - 按照加入順序分配動物
    - 如果超過 10 人，數字遞增
    """
    count = len(room.members)
    animal = ANIMALS[count % len(ANIMALS)]
    number = (count // len(ANIMALS)) + 1
    return f"{animal} {number}"
