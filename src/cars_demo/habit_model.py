"""
습관 모델 모듈: 상호작용 로그를 (컨텍스트, 아이템)별 습관 강도로 변환하는 모듈

습관 강도는 두 항의 가중합으로 계산합니다.
1. 반복 항 R' = log(R + 1) / log(CAP + 1): 반복이 늘수록 증가폭이 줄어드는 수확 체감
2. 강화 항 PR = rating / rating_max: 만족도를 0.0-1.0으로 정규화

    H = alpha * R' + beta * PR

train()은 매번 습관 테이블과 규칙 집합을 처음부터 다시 계산하여
새로운 TrainedModel 스냅샷을 반환합니다 (증분 갱신 없음).
"""
from __future__ import annotations

import logging
from collections import defaultdict
from math import log
from typing import Dict, Iterable, List, Optional

from .config import EngineConfig
from .data_models import (
    Context,
    HabitKey,
    HabitRecord,
    Interaction,
    RejectedRecord,
    TrainedModel,
)
from .rule_mining import extract_rules
from .validation import InvalidInputError, validate_context, validate_interaction

logger = logging.getLogger(__name__)


def normalized_repetition(repetition: int, config: EngineConfig) -> float:
    """반복 횟수를 로그 압축하여 0.0-1.0으로 정규화"""
    value = log(max(repetition, 0) + 1) / log(config.repetition_cap + 1)
    return _clamp(value)


def normalized_reinforcement(rating: float, config: EngineConfig) -> float:
    """평점을 0.0-1.0으로 정규화"""
    return _clamp(rating / config.rating_max)


def habit_strength(repetition: int, rating: float, config: Optional[EngineConfig] = None) -> float:
    """
    습관 강도 H = alpha * R' + beta * PR 를 계산하는 함수

    Args:
        repetition: 누적 반복 횟수 R
        rating: 평균 평점 (0 ~ rating_max)
        config: 계수 설정 (None이면 기본값)

    Returns:
        습관 강도 (0.0-1.0)
    """
    config = config or EngineConfig()
    return _clamp(
        config.alpha * normalized_repetition(repetition, config)
        + config.beta * normalized_reinforcement(rating, config)
    )


def build_habit_table(
    interactions: Iterable[Interaction],
    config: EngineConfig,
) -> Dict[HabitKey, HabitRecord]:
    """
    검증된 상호작용 목록에서 습관 테이블을 구축하는 함수

    같은 (컨텍스트, 아이템) 쌍의 여러 기록은 반복 횟수를 합산하고
    평점을 평균하여 하나의 HabitRecord로 만듭니다.
    상호작용이 없는 쌍은 레코드가 생기지 않습니다 (0이 아니라 부재).

    Args:
        interactions: 검증을 통과한 상호작용 목록
        config: 습관 모델 설정

    Returns:
        (컨텍스트 ID, 아이템 ID) -> HabitRecord 딕셔너리
    """
    repetitions: Dict[HabitKey, int] = defaultdict(int)
    rating_sums: Dict[HabitKey, float] = defaultdict(float)
    observations: Dict[HabitKey, int] = defaultdict(int)

    for interaction in interactions:
        key = (interaction.context_id, interaction.item_id)
        repetitions[key] += int(interaction.repetition_count)
        rating_sums[key] += float(interaction.rating)
        observations[key] += 1

    table: Dict[HabitKey, HabitRecord] = {}
    for key, count in observations.items():
        context_id, item_id = key
        repetition = repetitions[key]
        rating = rating_sums[key] / count
        table[key] = HabitRecord(
            context_id=context_id,
            item_id=item_id,
            repetition=repetition,
            normalized_repetition=normalized_repetition(repetition, config),
            normalized_reinforcement=normalized_reinforcement(rating, config),
            strength=habit_strength(repetition, rating, config),
        )
    return table


def train(
    interactions: Iterable[Interaction],
    contexts: Iterable[Context],
    config: Optional[EngineConfig] = None,
) -> TrainedModel:
    """
    상호작용 로그로 엔진을 학습시켜 새 TrainedModel을 만드는 함수

    형식이 잘못된 컨텍스트나 상호작용은 경고 로그와 함께 건너뛰고
    model.rejected에 사유를 남깁니다. 잘못된 레코드 하나가
    전체 학습을 중단시키지 않습니다. 빈 입력은 빈 모델을 만듭니다.

    Args:
        interactions: 학습용 상호작용 목록
        contexts: 상호작용이 참조하는 컨텍스트 정의 목록
        config: 엔진 설정 (None이면 기본값)

    Returns:
        습관 테이블과 규칙 집합을 담은 불변 스냅샷
    """
    config = config or EngineConfig()
    rejected: List[RejectedRecord] = []

    valid_contexts: Dict[str, Context] = {}
    for context in contexts:
        try:
            validate_context(context)
        except InvalidInputError as exc:
            _reject(rejected, context, exc)
            continue
        if context.id in valid_contexts:
            logger.debug("Context %r supplied twice; keeping the last definition", context.id)
        valid_contexts[context.id] = context

    valid_interactions: List[Interaction] = []
    for interaction in interactions:
        try:
            valid_interactions.append(validate_interaction(interaction, valid_contexts, config))
        except InvalidInputError as exc:
            _reject(rejected, interaction, exc)

    habits = build_habit_table(valid_interactions, config)
    rules = extract_rules(valid_interactions, valid_contexts, config)

    logger.info(
        "Trained habit model: %d habits, %d rules, %d contexts, %d rejected records",
        len(habits),
        len(rules),
        len(valid_contexts),
        len(rejected),
    )
    return TrainedModel(
        config=config,
        contexts=valid_contexts,
        habits=habits,
        rules=rules,
        rejected=tuple(rejected),
        is_trained=True,
    )


def _reject(rejected: List[RejectedRecord], record, exc: InvalidInputError) -> None:
    logger.warning("Rejected %s: %s", type(record).__name__, exc)
    rejected.append(RejectedRecord(record=record, reason=str(exc)))


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))

