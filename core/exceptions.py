"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

對應的 HTTP 狀態碼：
- InvalidInput / InvalidPhase → 400
- NotRoomHost → 403
- NotFound 系列 → 404
- 其他 → 500
"""


class BushinGameException(Exception):
    """所有遊戲異常的基類"""
    pass


class InvalidInput(BushinGameException):
    """輸入缺漏、格式錯誤或超出範圍（例如空白的技、投票給自己）"""
    pass


# ============ 找不到資源 ============

class NotFound(BushinGameException):
    """找不到資源的基類"""
    pass


class RoomNotFound(NotFound):
    """房間不存在"""
    def __init__(self, code):
        self.code = code
        super().__init__(f"Room {code} not found")


class MemberNotFound(NotFound):
    """成員不在這個房間"""
    def __init__(self, member_id, code=None):
        self.member_id = member_id
        self.code = code
        where = f" in room {code}" if code else ""
        super().__init__(f"Member {member_id} not found{where}")


class PostNotFound(NotFound):
    """投稿不存在"""
    def __init__(self, post_id):
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


# ============ 權限 / 狀態 ============

class NotRoomHost(BushinGameException):
    """只有房主可以執行的操作"""
    pass


class InvalidPhase(BushinGameException):
    """目前的階段不允許這個操作（或非法的狀態轉換）"""
    pass


class RoomCodeExhausted(BushinGameException):
    """重試多次仍找不到可用的房間代碼"""
    pass
