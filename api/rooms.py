"""
Room API Endpoints - 短輪詢版

重點：
1. 所有業務邏輯集中在 RoomRegistry / RoomStateMachine
2. 每個回應都是房間的完整 snapshot，前端靠 GET /rooms/{code} 輪詢更新畫面
3. snapshot 的 version 每次變更都會 +1，前端可以用來判斷要不要重畫
"""
from fastapi import APIRouter, Depends, HTTPException

import logging

from store import Store, get_store
from schemas import (
    RoomEnter,
    RoomEnterResponse,
    RoomRestart,
    RoomSnapshot,
    TechniqueSubmit,
    TechniqueResponse,
    VoteSubmit,
    VoteResponse,
)
from core.locks import room_lock
from core.exceptions import (
    InvalidInput,
    InvalidPhase,
    NotFound,
    NotRoomHost,
)
from services.snapshot_service import room_snapshot

router = APIRouter(prefix="/rooms", tags=["rooms"])
logger = logging.getLogger(__name__)


@router.post("", response_model=RoomEnterResponse, status_code=201)
def create_room(body: RoomEnter, store: Store = Depends(get_store)):
    """
    建立房間（呼叫者成為 Host）

    返回：
        - snapshot（lobby 階段，只有 Host 一個成員）
        - memberId: Host 的 ID（之後所有操作都要帶 callerId）
    """
    try:
        room, host = store.rooms.create_room(body.display_name, body.caller_id)
        with room_lock(room):
            return RoomEnterResponse(**room_snapshot(room), member_id=host.id)

    except Exception as e:
        logger.error(f"Failed to create room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{code}/join", response_model=RoomEnterResponse)
def join_room(code: str, body: RoomEnter, store: Store = Depends(get_store)):
    """
    加入房間

    - 任何階段都可以加入；中途加入的人沒有技，但之後的「全員提交 / 全員投票」會把他算進去
    - 帶著已存在的 callerId 再呼叫一次 = 重連，只會更新名字
    """
    try:
        room, member = store.rooms.join_room(code, body.display_name, body.caller_id)
        with room_lock(room):
            return RoomEnterResponse(**room_snapshot(room), member_id=member.id)

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to join room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{code}", response_model=RoomSnapshot)
def get_room(code: str, store: Store = Depends(get_store)):
    """
    取得房間狀態（前端輪詢用）

    技的內容只有在 voting / result 階段才會出現
    """
    try:
        room = store.rooms.get_room(code)
        with room_lock(room):
            return RoomSnapshot(**room_snapshot(room))

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to get room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{code}/start", response_model=RoomSnapshot)
def start_round(code: str, body: RoomRestart, store: Store = Depends(get_store)):
    """
    開始新的一輪（Host endpoint）

    效果：
    - 階段變成 building
    - 清空所有人的技、投票和上一輪的結果
    """
    try:
        room = store.rooms.get_room(code)
        with room_lock(room):
            store.state_machine.restart(room, body.caller_id)
            return RoomSnapshot(**room_snapshot(room))

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NotRoomHost as e:
        logger.warning(f"Rejected restart of room {code} by {body.caller_id}")
        raise HTTPException(status_code=403, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to start round: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{code}/technique", response_model=TechniqueResponse)
def submit_technique(code: str, body: TechniqueSubmit, store: Store = Depends(get_store)):
    """
    提交技（building 階段）

    返回：
        - snapshot
        - allSubmitted: 這次提交是否讓全員提交完成（此時階段已經是 voting）
    """
    try:
        room = store.rooms.get_room(code)
        with room_lock(room):
            all_submitted = store.state_machine.submit_technique(room, body.caller_id, body.text)
            return TechniqueResponse(**room_snapshot(room), all_submitted=all_submitted)

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidPhase, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to submit technique: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{code}/vote", response_model=VoteResponse)
def cast_vote(code: str, body: VoteSubmit, store: Store = Depends(get_store)):
    """
    投票（voting 階段）

    返回：
        - snapshot（全員投完時含 resultSummary / winnerIds / voteCounts）
        - allVoted: 這一票是否讓全員投票完成
    """
    try:
        room = store.rooms.get_room(code)
        with room_lock(room):
            all_voted = store.state_machine.cast_vote(room, body.caller_id, body.target_id)
            return VoteResponse(**room_snapshot(room), all_voted=all_voted)

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidPhase, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to cast vote: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
