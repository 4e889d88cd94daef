"""
設定：所有可調整的參數集中在這裡

透過環境變數或 .env 覆寫，例如：
    TECHNIQUE_MAX_LENGTH=60
    TALLY_TIE_MODE=first
"""
from functools import lru_cache
from typing import List, Literal, Optional
import string

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Bushin Game API"
    api_prefix: str = ""
    log_level: str = "INFO"

    # HTTP
    cors_allow_origins: List[str] = ["*"]
    max_body_bytes: int = 16 * 1024
    static_dir: Optional[str] = None

    # Room code
    room_code_length: int = 4
    room_code_alphabet: str = string.ascii_uppercase + string.digits
    room_code_max_attempts: int = 1000

    # 文字長度上限（超過就截斷）
    display_name_max_length: int = 24
    technique_max_length: int = 40

    # all: 同票全部算贏家；first: 只取第一個達到最高票的人
    tally_tie_mode: Literal["all", "first"] = "all"

    # Posts feed
    post_author_max_length: int = 24
    post_title_max_length: int = 60
    post_text_max_length: int = 400
    posts_max_stored: int = 100
    posts_default_limit: int = 20
    posts_max_limit: int = 100

    @field_validator("room_code_length")
    @classmethod
    def clamp_room_code_length(cls, value: int) -> int:
        return min(max(value, 4), 6)

    @field_validator("api_prefix")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
