"""추천 랭커 모듈: 다중 신호를 결합하여 컨텍스트별 아이템 추천 목록을 생성하는 모듈

이 모듈은 다음 신호들을 종합하여 추천 점수를 계산합니다:
- 직접 신호: 정확히 같은 컨텍스트에서 학습된 습관 강도
- 유사 신호: 다른 학습 컨텍스트의 습관 강도를 컨텍스트 유사도로 가중 평균한 값에
  가장 높은 유사도를 곱한 값
- 규칙 신호: 질의 컨텍스트에서 발화한 연관 규칙의 최대 신뢰도

유사 신호는 단순 가중 평균 (Σ sim·H / Σ sim) 에서 의도적으로 벗어나
max sim 을 한 번 더 곱합니다. 단순 평균은 유사도가 0.01인 컨텍스트 하나만 있어도
그 컨텍스트의 습관 강도를 그대로 돌려주기 때문입니다.

혼합 방식:
    fallback = (w_sim * similar + w_rule * rule) / (w_sim + w_rule)
    직접 증거가 있으면  score = w_direct * direct + (1 - w_direct) * fallback
    직접 증거가 없으면  score = fallback

모든 신호가 0.0-1.0 범위이므로 최종 점수도 0.0-1.0이며, 각 신호에 대해 단조 증가합니다.
w_direct > 0 이므로 직접 증거는 간접 신호에 의해 완전히 무시되지 않고,
아무 근거도 없는 아이템은 0점을 받습니다.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .data_models import AssociationRule, Context, RecommendationResult, TrainedModel
from .explanation import ExplanationGenerator, ExplanationInputs
from .rule_mining import matching_rules
from .similarity import context_similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarEvidence:
    """유사 컨텍스트에서 모은 간접 증거"""
    score: float                          # 최근접 유사도로 할인된 가중 평균
    best_context: Optional[Context] = None  # 가장 크게 기여한 컨텍스트
    best_similarity: float = 0.0


class HabitRecommender:
    """
    추천 랭커 클래스: 학습된 스냅샷을 읽어 후보 아이템의 순위를 매김

    상태를 변경하지 않으므로 같은 스냅샷에 대해 여러 스레드에서 동시에 호출해도 안전합니다.
    """

    def __init__(
        self,
        model: TrainedModel,
        explanation_generator: Optional[ExplanationGenerator] = None,
    ) -> None:
        """
        추천 랭커를 초기화하는 함수

        Args:
            model: train()이 만든 학습 스냅샷
            explanation_generator: 설명 생성기 (None이면 기본 템플릿 생성기)
        """
        self.model = model
        self.config = model.config
        self.explanations = explanation_generator or ExplanationGenerator()

    def recommend(
        self,
        context: Context,
        candidates: Sequence[str],
        k: int,
    ) -> List[RecommendationResult]:
        """
        컨텍스트에 맞는 상위 k개 추천 목록을 생성하는 함수

        Args:
            context: 질의 컨텍스트 (학습에 쓰이지 않은 새 컨텍스트도 가능)
            candidates: 후보 아이템 ID 목록 (중복은 첫 번째만 사용)
            k: 최대 추천 개수

        Returns:
            점수 내림차순, 동점이면 아이템 ID 순으로 정렬된 추천 목록
        """
        if k <= 0 or not candidates:
            return []
        # 학습 전이거나 빈 데이터로 학습된 경우
        if not self.model.habits:
            return []

        # dict.fromkeys()로 순서를 유지하며 중복 제거
        unique_candidates = list(dict.fromkeys(candidates))

        results = [self._score_item(context, item_id) for item_id in unique_candidates]
        if self.config.nonzero_only:
            results = [result for result in results if result.score > 0.0]

        results.sort(key=lambda result: (-result.score, result.item_id))
        return results[:k]

    def _score_item(self, context: Context, item_id: str) -> RecommendationResult:
        config = self.config

        # 1. 직접 신호: 정확히 같은 컨텍스트의 습관 레코드
        record = self.model.habit(context.id, item_id)
        direct = record.strength if record is not None else None

        # 2. 유사 신호: 다른 컨텍스트들의 습관을 유사도로 가중
        similar = self._similar_evidence(context, item_id)

        # 3. 규칙 신호: 발화한 규칙 중 최대 신뢰도
        rule = self._best_rule(context, item_id)
        rule_confidence = rule.confidence if rule is not None else 0.0

        indirect_total = config.similarity_weight + config.rule_weight
        similar_share = config.similarity_weight / indirect_total
        rule_share = config.rule_weight / indirect_total

        if direct is not None:
            direct_share = config.direct_weight
            indirect_scale = 1.0 - config.direct_weight
        else:
            direct_share = 0.0
            indirect_scale = 1.0

        contributions = {
            "direct": direct_share * (direct or 0.0),
            "similar": indirect_scale * similar_share * similar.score,
            "rule": indirect_scale * rule_share * rule_confidence,
        }
        score = max(0.0, min(1.0, sum(contributions.values())))

        explanation = self.explanations.build_message(
            ExplanationInputs(
                contributions=contributions,
                direct_strength=direct,
                similar_context=similar.best_context,
                similar_similarity=similar.best_similarity,
                rule=rule,
            )
        )
        logger.debug(
            "Scored %s in %s: direct=%s similar=%.3f rule=%.3f -> %.3f",
            item_id,
            context.id,
            direct,
            similar.score,
            rule_confidence,
            score,
        )
        return RecommendationResult(
            item_id=item_id,
            score=score,
            explanation=explanation,
            signals={
                "direct": direct or 0.0,
                "similar": similar.score,
                "rule": rule_confidence,
            },
        )

    def _similar_evidence(self, context: Context, item_id: str) -> SimilarEvidence:
        """
        같은 아이템의 다른 컨텍스트 습관을 유사도로 가중 평균하는 내부 함수

        가중 평균만 쓰면 유사도가 아주 낮은 컨텍스트 하나가 높은 점수를 만들 수 있으므로
        가장 유사한 컨텍스트의 유사도를 곱해 할인합니다.

        Args:
            context: 질의 컨텍스트
            item_id: 대상 아이템

        Returns:
            간접 증거 (근거가 없으면 score=0)
        """
        weighted_sum = 0.0
        similarity_sum = 0.0
        max_similarity = 0.0
        best_context: Optional[Context] = None
        best_contribution = 0.0
        best_similarity = 0.0

        for record in self.model.habits_by_item.get(item_id, ()):
            if record.context_id == context.id:
                continue
            other = self.model.contexts.get(record.context_id)
            if other is None:
                continue
            similarity = context_similarity(context, other)
            if similarity <= 0.0:
                continue
            weighted_sum += similarity * record.strength
            similarity_sum += similarity
            max_similarity = max(max_similarity, similarity)
            # 레코드는 컨텍스트 ID 순이므로 동점이면 먼저 나온 컨텍스트 유지
            contribution = similarity * record.strength
            if best_context is None or contribution > best_contribution:
                best_context = other
                best_contribution = contribution
                best_similarity = similarity

        if similarity_sum == 0.0:
            return SimilarEvidence(score=0.0)

        average = weighted_sum / similarity_sum
        return SimilarEvidence(
            score=max(0.0, min(1.0, average * max_similarity)),
            best_context=best_context,
            best_similarity=best_similarity,
        )

    def _best_rule(self, context: Context, item_id: str) -> Optional[AssociationRule]:
        # 규칙은 신뢰도 내림차순으로 정렬되어 있으므로 첫 번째가 최대
        fired = matching_rules(self.model.rules, context, item_id)
        return fired[0] if fired else None


def recommend(
    model: TrainedModel,
    context: Context,
    candidates: Sequence[str],
    k: int,
) -> List[RecommendationResult]:
    """학습 스냅샷에 대해 추천을 수행하는 편의 함수"""
    return HabitRecommender(model).recommend(context, candidates, k)
