"""
Posts API Endpoints（技 SNS）

和房間無關，只有投稿 / 列表 / 按讚
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

import logging

from store import Store, get_store
from schemas import PostCreate, PostLike, PostResponse, LikeResponse
from core.exceptions import InvalidInput, PostNotFound
from services.snapshot_service import post_view

router = APIRouter(prefix="/posts", tags=["posts"])
logger = logging.getLogger(__name__)


@router.post("", response_model=PostResponse, status_code=201)
def create_post(body: PostCreate, store: Store = Depends(get_store)):
    """
    新增投稿

    返回投稿內容（不含誰按過讚）
    """
    try:
        post = store.posts.create_post(body.author_name, body.title, body.text)
        return post_view(post)

    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create post: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("", response_model=List[PostResponse])
def list_posts(
    limit: Optional[int] = Query(None),
    caller_id: Optional[str] = Query(None, alias="callerId"),
    store: Store = Depends(get_store)
):
    """
    最新的投稿列表（新的在前）

    參數：
        limit: 筆數（有上限）
        callerId: 有帶的話，每筆會標示自己是否按過讚
    """
    try:
        posts = store.posts.list_posts(limit)
        return [post_view(post, caller_id) for post in posts]

    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to list posts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{post_id}/like", response_model=LikeResponse)
def toggle_like(post_id: str, body: PostLike, store: Store = Depends(get_store)):
    """按讚 / 取消讚"""
    try:
        post, liked, like_count = store.posts.toggle_like(post_id, body.caller_id)
        return LikeResponse(post_id=post.id, like_count=like_count, liked=liked)

    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PostNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to toggle like: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
