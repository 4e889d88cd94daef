"""
記憶體 Store：整個服務唯一擁有狀態的物件

- rooms: RoomRegistry
- posts: PostFeed
- state_machine: 依設定建好的 RoomStateMachine

在 create_app() 裡建立一次（啟動時是空的），掛在 app.state 上，
endpoint 透過 get_store dependency 取得，不使用 module-level 全域變數
"""
from dataclasses import dataclass

from fastapi import Request

from config import Settings
from core.room_registry import RoomRegistry
from core.post_feed import PostFeed
from core.state_machine import RoomStateMachine


@dataclass
class Store:
    rooms: RoomRegistry
    posts: PostFeed
    state_machine: RoomStateMachine

    @classmethod
    def from_settings(cls, settings: Settings) -> "Store":
        return cls(
            rooms=RoomRegistry(
                code_length=settings.room_code_length,
                code_alphabet=settings.room_code_alphabet,
                max_code_attempts=settings.room_code_max_attempts,
                display_name_max_length=settings.display_name_max_length,
            ),
            posts=PostFeed(
                max_stored=settings.posts_max_stored,
                default_limit=settings.posts_default_limit,
                max_limit=settings.posts_max_limit,
                author_max_length=settings.post_author_max_length,
                title_max_length=settings.post_title_max_length,
                text_max_length=settings.post_text_max_length,
            ),
            state_machine=RoomStateMachine(
                technique_max_length=settings.technique_max_length,
                tie_mode=settings.tally_tie_mode,
            ),
        )


def get_store(request: Request) -> Store:
    """
    FastAPI dependency：提供 Store

    測試時每個 app 都有自己的 Store，不會互相污染
    """
    return request.app.state.store
