"""
심볼릭 규칙 추출 모듈: 상호작용 로그에서 "컨텍스트 특징 => 아이템" 연관 규칙을 마이닝

각 상호작용을 하나의 트랜잭션으로 보고, 해당 컨텍스트의 (차원, 값) 토큰 조합을
전건(antecedent)으로, 선택된 아이템을 후건(consequent)으로 하는 규칙을 만듭니다.

- 지지도(support): 전건과 아이템을 모두 포함하는 트랜잭션 비율
- 신뢰도(confidence): 전건이 주어졌을 때 아이템이 선택될 조건부 확률

유사도 계산과 독립적인 해석 가능한 신호로서, 추천 점수를 보강하고
"저녁에 집에 있을 때는 X를 자주 선택합니다" 같은 설명을 만드는 데 사용됩니다.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple

from .config import EngineConfig
from .data_models import AssociationRule, Context, FeatureToken, Interaction

logger = logging.getLogger(__name__)

Antecedent = FrozenSet[FeatureToken]


def extract_rules(
    interactions: Iterable[Interaction],
    contexts: Mapping[str, Context],
    config: EngineConfig,
) -> Tuple[AssociationRule, ...]:
    """
    상호작용 로그에서 임계값을 넘는 연관 규칙을 추출하는 함수

    Args:
        interactions: 검증을 통과한 상호작용 목록
        contexts: 컨텍스트 ID -> 컨텍스트 매핑
        config: 최소 지지도/신뢰도 및 최대 전건 크기 설정

    Returns:
        신뢰도, 지지도 내림차순으로 정렬된 규칙 튜플
    """
    # 전건별 등장 횟수
    antecedent_counts: Dict[Antecedent, int] = defaultdict(int)
    # 전건 -> 아이템 -> 동시 등장 횟수
    joint_counts: Dict[Antecedent, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    total = 0

    for interaction in interactions:
        context = contexts.get(interaction.context_id)
        if context is None:
            continue
        total += 1
        for antecedent in _antecedents(context, config.max_antecedent_size):
            antecedent_counts[antecedent] += 1
            joint_counts[antecedent][interaction.item_id] += 1

    if total == 0:
        return ()

    rules: List[AssociationRule] = []
    for antecedent, items in joint_counts.items():
        for item_id, joint in items.items():
            support = joint / total
            confidence = joint / antecedent_counts[antecedent]
            if support >= config.min_support and confidence >= config.min_confidence:
                rules.append(
                    AssociationRule(
                        antecedent=antecedent,
                        consequent=item_id,
                        support=support,
                        confidence=confidence,
                    )
                )

    rules.sort(key=_rule_order)
    logger.debug("Extracted %d rules from %d transactions", len(rules), total)
    return tuple(rules)


def matching_rules(
    rules: Sequence[AssociationRule],
    context: Context,
    item_id: str,
) -> List[AssociationRule]:
    """
    주어진 컨텍스트에서 발화하는 특정 아이템의 규칙들을 찾는 함수

    전건의 모든 조건이 컨텍스트 토큰에 포함되어야 규칙이 발화합니다.
    단일 특징 규칙의 경우 이는 컨텍스트와 교집합이 있는지와 같습니다.

    Args:
        rules: 규칙 목록 (extract_rules 순서 유지)
        context: 질의 컨텍스트
        item_id: 후건 아이템

    Returns:
        발화한 규칙 목록 (입력 순서 유지)
    """
    tokens = context.tokens()
    return [
        rule
        for rule in rules
        if rule.consequent == item_id and rule.antecedent <= tokens
    ]


def _antecedents(context: Context, max_size: int) -> List[Antecedent]:
    """컨텍스트 토큰으로 만들 수 있는 크기 1..max_size의 모든 조합"""
    # 차원이 유일하므로 토큰 조합마다 차원이 중복되지 않음
    tokens = sorted(context.tokens())
    antecedents: List[Antecedent] = []
    for size in range(1, min(max_size, len(tokens)) + 1):
        antecedents.extend(frozenset(combo) for combo in combinations(tokens, size))
    return antecedents


def _rule_order(rule: AssociationRule):
    return (
        -rule.confidence,
        -rule.support,
        -len(rule.antecedent),
        sorted(rule.antecedent),
        rule.consequent,
    )
