"""
Posts Feed：技 SNS（投稿 / 列表 / 按讚）

和房間完全獨立，只是一個有上限的列表，新的在前面
"""
from typing import List, Optional, Tuple
import logging
import threading

from models import Post
from core.exceptions import InvalidInput, PostNotFound
from services.naming_service import generate_post_id
from services.text_service import clip_text, first_line

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Anonymous"


class PostFeed:
    """技 SNS 的投稿列表（新的在前，有上限），所有修改都在 feed lock 之內"""

    def __init__(
        self,
        max_stored: int = 100,
        default_limit: int = 20,
        max_limit: int = 100,
        author_max_length: int = 24,
        title_max_length: int = 60,
        text_max_length: int = 400,
    ):
        self.max_stored = max_stored
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.author_max_length = author_max_length
        self.title_max_length = title_max_length
        self.text_max_length = text_max_length
        self._posts: List[Post] = []
        self._lock = threading.Lock()

    def create_post(self, author_name: Optional[str], title: Optional[str], text: str) -> Post:
        """
        新增投稿

        - 作者空白 → Anonymous
        - 標題空白 → 內文第一行
        - 超過 max_stored 時丟掉最舊的

        異常：
            InvalidInput: 內文是空的
        """
        body = clip_text(text, self.text_max_length)
        if not body:
            raise InvalidInput("Post text must not be empty")

        post = Post(
            id=generate_post_id(),
            author_name=clip_text(author_name, self.author_max_length) or DEFAULT_AUTHOR,
            title=clip_text(title, self.title_max_length) or clip_text(first_line(body), self.title_max_length),
            text=body,
        )

        with self._lock:
            self._posts.insert(0, post)
            dropped = len(self._posts) - self.max_stored
            if dropped > 0:
                del self._posts[self.max_stored:]
                logger.info(f"Dropped {dropped} oldest post(s) from the feed")

        logger.info(f"Post {post.id} created by {post.author_name}")
        return post

    def list_posts(self, limit: Optional[int] = None) -> List[Post]:
        """
        最新的投稿（新的在前）

        異常：
            InvalidInput: limit <= 0
        """
        if limit is None:
            limit = self.default_limit
        if limit <= 0:
            raise InvalidInput("limit must be a positive integer")
        limit = min(limit, self.max_limit)

        with self._lock:
            return self._posts[:limit]

    def get_post(self, post_id: str) -> Post:
        with self._lock:
            for post in self._posts:
                if post.id == post_id:
                    return post
        raise PostNotFound(post_id)

    def toggle_like(self, post_id: str, caller_id: str) -> Tuple[Post, bool, int]:
        """
        按讚 / 取消讚（同一個 caller 再按一次就取消）

        返回：
            (post, 這次之後是否為已讚, 讚數)，都在 lock 之內算出來

        異常：
            InvalidInput: caller_id 空白
            PostNotFound: 投稿不存在
        """
        if not caller_id or not caller_id.strip():
            raise InvalidInput("callerId is required")

        post = self.get_post(post_id)
        with self._lock:
            if caller_id in post.liked_by:
                post.liked_by.discard(caller_id)
            else:
                post.liked_by.add(caller_id)
            return post, caller_id in post.liked_by, post.like_count

    def post_count(self) -> int:
        return len(self._posts)
