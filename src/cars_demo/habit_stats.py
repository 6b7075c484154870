"""습관 통계 모듈: 학습된 습관 테이블 요약"""
from __future__ import annotations

from typing import Dict, Optional

from .data_models import HabitStatistics, ItemStrength, TrainedModel

# 상위 습관 기본 개수
DEFAULT_TOP_N = 5


def get_habit_statistics(
    model: TrainedModel,
    top_n: Optional[int] = DEFAULT_TOP_N,
) -> HabitStatistics:
    """
    습관 테이블의 개수, 평균 강도, 아이템별 상위 습관을 계산하는 함수

    아이템별 강도는 모든 컨텍스트 중 최대 습관 강도로 집계합니다.

    Args:
        model: 학습 스냅샷
        top_n: 상위 습관 개수 (None이면 전체)

    Returns:
        습관 통계 (습관이 없으면 0으로 채운 빈 통계)
    """
    records = list(model.habits.values())
    if not records:
        return HabitStatistics.empty()

    total = len(records)
    average = sum(record.strength for record in records) / total

    # 아이템 -> 컨텍스트 전체에서의 최대 강도
    best_by_item: Dict[str, float] = {}
    for record in records:
        current = best_by_item.get(record.item_id)
        if current is None or record.strength > current:
            best_by_item[record.item_id] = record.strength

    ranked = sorted(best_by_item.items(), key=lambda pair: (-pair[1], pair[0]))
    if top_n is not None:
        ranked = ranked[:max(top_n, 0)]

    return HabitStatistics(
        total_habits=total,
        avg_habit_strength=average,
        top_habits=tuple(ItemStrength(item_id=item_id, strength=strength) for item_id, strength in ranked),
    )
