"""입력 검증 모듈: train()에 전달되는 컨텍스트와 상호작용 레코드 검증"""
from __future__ import annotations

import math
from numbers import Integral, Real
from typing import Mapping

from .config import EngineConfig
from .data_models import Context, Interaction


class InvalidInputError(ValueError):
    """형식이 잘못된 Context 또는 Interaction"""


def validate_context(context: Context) -> Context:
    """
    컨텍스트 하나를 검증하는 함수

    Args:
        context: 검증할 컨텍스트

    Returns:
        검증을 통과한 동일한 컨텍스트

    Raises:
        InvalidInputError: id가 비어 있거나, 특징이 없거나,
            차원이나 값이 비어 있지 않은 문자열이 아니거나,
            차원이 중복되거나, 가중치가 음수/비정상 값인 경우
    """
    if not isinstance(context, Context):
        raise InvalidInputError(f"expected Context, got {type(context).__name__}")
    if not context.id:
        raise InvalidInputError("context id must not be empty")
    if not context.features:
        raise InvalidInputError(f"context {context.id!r} has no features")

    seen = set()
    for feature in context.features:
        if not isinstance(feature.dimension, str) or not feature.dimension:
            raise InvalidInputError(
                f"context {context.id!r} has invalid dimension {feature.dimension!r}"
            )
        if not isinstance(feature.value, str) or not feature.value:
            raise InvalidInputError(
                f"context {context.id!r} has invalid value {feature.value!r} "
                f"for dimension {feature.dimension!r}"
            )
        if feature.dimension in seen:
            raise InvalidInputError(
                f"context {context.id!r} repeats dimension {feature.dimension!r}"
            )
        seen.add(feature.dimension)
        weight = feature.weight
        if not isinstance(weight, Real) or not math.isfinite(weight) or weight < 0:
            raise InvalidInputError(
                f"context {context.id!r} has invalid weight {weight!r} "
                f"for dimension {feature.dimension!r}"
            )
    return context


def validate_interaction(
    interaction: Interaction,
    contexts: Mapping[str, Context],
    config: EngineConfig,
) -> Interaction:
    """
    상호작용 레코드 하나를 검증하는 함수

    Args:
        interaction: 검증할 상호작용
        contexts: 유효한 컨텍스트 ID -> 컨텍스트 매핑
        config: 평점 척도(rating_max)를 담은 설정

    Returns:
        검증을 통과한 동일한 레코드

    Raises:
        InvalidInputError: 알 수 없는 컨텍스트, 빈 아이템 ID,
            음수/정수가 아닌 반복 횟수, 척도를 벗어난 평점인 경우
    """
    if not isinstance(interaction, Interaction):
        raise InvalidInputError(f"expected Interaction, got {type(interaction).__name__}")
    if interaction.context_id not in contexts:
        raise InvalidInputError(f"unknown context {interaction.context_id!r}")
    if not interaction.item_id:
        raise InvalidInputError("item id must not be empty")

    count = interaction.repetition_count
    # bool은 Integral의 하위 타입이므로 별도로 제외
    if isinstance(count, bool) or not isinstance(count, Integral) or count < 0:
        raise InvalidInputError(f"repetition count must be a non-negative integer, got {count!r}")

    rating = interaction.rating
    if isinstance(rating, bool) or not isinstance(rating, Real) or not math.isfinite(rating):
        raise InvalidInputError(f"rating must be a finite number, got {rating!r}")
    if not 0.0 <= rating <= config.rating_max:
        raise InvalidInputError(
            f"rating {rating!r} outside scale [0, {config.rating_max}]"
        )
    return interaction
