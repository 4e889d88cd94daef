"""
文字處理：去空白 + 長度截斷

唯一的輸入淨化就是截斷，不做 HTML escape 之類的處理（由前端負責）
"""
from typing import Optional


def clip_text(text: Optional[str], max_length: int) -> str:
    """
    去掉前後空白並截斷到 max_length

    範例：
        clip_text("  Dragon Strike  ", 40) -> "Dragon Strike"
        clip_text(None, 40) -> ""
    """
    if text is None:
        return ""
    return text.strip()[:max_length].rstrip()


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
