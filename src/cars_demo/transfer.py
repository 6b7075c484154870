"""
조합적 전이 모듈: 원본 컨텍스트의 습관을 특징이 겹치는 대상 컨텍스트로 투영

두 컨텍스트를 원자적 특징으로 분해하고, 겹치는 특징의 비중(코사인 유사도)만큼
원본 습관 강도를 대상 컨텍스트로 옮깁니다.

    transfer_score = H_source x similarity(source, target)

대상 컨텍스트에서 새로 학습하는 것은 없으며, 원본 컨텍스트에 습관이 없는
아이템은 결과에 나타나지 않습니다.
"""
from __future__ import annotations

from typing import List

from .data_models import Context, TrainedModel, TransferResult
from .similarity import context_similarity


def transfer_habits(
    model: TrainedModel,
    source: Context,
    target: Context,
) -> List[TransferResult]:
    """
    원본 컨텍스트의 습관을 대상 컨텍스트로 전이하는 함수

    Args:
        model: 학습 스냅샷
        source: 습관을 가져올 원본 컨텍스트
        target: 습관을 투영할 대상 컨텍스트

    Returns:
        전이 점수 내림차순(동점이면 아이템 ID 순) 목록.
        원본 컨텍스트에 학습된 습관이 없으면 빈 목록
    """
    records = model.habits_by_context.get(source.id, ())
    if not records:
        return []

    similarity = context_similarity(source, target)
    results = [
        TransferResult(
            item_id=record.item_id,
            transfer_score=record.strength * similarity,
            source_strength=record.strength,
        )
        for record in records
    ]
    results.sort(key=lambda result: (-result.transfer_score, result.item_id))
    return results
