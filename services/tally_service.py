"""
計票服務：所有人投完票後決定贏家

純計算邏輯，不改變 Room 的狀態（由 RoomStateMachine 負責寫回）
"""
from dataclasses import dataclass
from typing import Dict, List

from models import Member

TIE_MODE_ALL = "all"
TIE_MODE_FIRST = "first"

NO_TECHNIQUE = "(no technique)"


@dataclass(frozen=True)
class TallyResult:
    counts: Dict[str, int]
    max_count: int
    winner_ids: List[str]
    summary: str


def count_votes(members: List[Member]) -> Dict[str, int]:
    """
    計算每個成員得到的票數

    - 所有成員都從 0 開始（沒人投的也會出現在結果裡）
    - dict 的順序 = members 的順序（加入順序）
    - 投給不在名單裡的人的票直接忽略
    """
    counts = {member.id: 0 for member in members}
    for member in members:
        if member.vote_target is not None and member.vote_target in counts:
            counts[member.vote_target] += 1
    return counts


def pick_winners(counts: Dict[str, int], tie_mode: str = TIE_MODE_ALL) -> List[str]:
    """
    依票數決定贏家

    tie_mode:
        all   - 所有最高票的人都是贏家（同票不是錯誤）
        first - 只取 counts 迭代順序中第一個達到最高票的人

    沒有任何人得票（max == 0）時沒有贏家
    """
    if tie_mode not in (TIE_MODE_ALL, TIE_MODE_FIRST):
        raise ValueError(f"Unknown tie mode: {tie_mode}")

    max_count = max(counts.values(), default=0)
    if max_count == 0:
        return []

    if tie_mode == TIE_MODE_FIRST:
        for member_id, count in counts.items():
            if count == max_count:
                return [member_id]

    return [member_id for member_id, count in counts.items() if count == max_count]


def _votes_label(count: int) -> str:
    return f"{count} vote" if count == 1 else f"{count} votes"


def build_summary(members: List[Member], counts: Dict[str, int], winner_ids: List[str]) -> str:
    """
    產生給人看的結果文字

    範例：
        Alice: Dragon Strike - 0 votes
        Bob: Iron Wall - 2 votes
        Carol: Flame Kick - 1 vote
        Winner: Bob (Iron Wall) with 2 votes
    """
    lines = []
    for member in members:
        technique = member.submission or NO_TECHNIQUE
        lines.append(f"{member.display_name}: {technique} - {_votes_label(counts.get(member.id, 0))}")

    by_id = {member.id: member for member in members}
    winners = [by_id[member_id] for member_id in winner_ids if member_id in by_id]
    if not winners:
        lines.append("No winner: no votes were cast")
    else:
        names = ", ".join(f"{w.display_name} ({w.submission or NO_TECHNIQUE})" for w in winners)
        label = _votes_label(counts[winners[0].id])
        if len(winners) == 1:
            lines.append(f"Winner: {names} with {label}")
        else:
            lines.append(f"Winners (tie): {names} with {label} each")

    return "\n".join(lines)


def tally(members: List[Member], tie_mode: str = TIE_MODE_ALL) -> TallyResult:
    """
    計票流程：
    1. 每個成員初始化 0 票
    2. 每張票 +1
    3. 找出最高票
    4. 決定贏家（依 tie_mode）
    5. 產生結果文字

    同樣的 (投票者, 目標) 組合永遠得到同樣的結果
    """
    counts = count_votes(members)
    winner_ids = pick_winners(counts, tie_mode)
    return TallyResult(
        counts=counts,
        max_count=max(counts.values(), default=0),
        winner_ids=winner_ids,
        summary=build_summary(members, counts, winner_ids),
    )
