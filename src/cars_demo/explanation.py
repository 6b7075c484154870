"""설명 생성 모듈: 추천 점수를 만든 신호를 사람이 읽을 수 있는 문장으로 변환"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .data_models import AssociationRule, Context

# 직접 습관 강도 구간별 라벨
STRONG_HABIT_THRESHOLD = 0.6
MODERATE_HABIT_THRESHOLD = 0.3

# 신호별 설명 템플릿
DIRECT_TEMPLATE = "{strength_label} habit in this exact context (H={strength:.2f})"
SIMILAR_TEMPLATE = "similar context transfer from {context_name} (similarity={similarity:.2f})"
RULE_TEMPLATE = "rule-based: {pattern} pattern (confidence={confidence:.2f})"

# 근거가 전혀 없을 때의 기본 설명
NO_EVIDENCE_REASON = "no habit, similar-context or rule evidence yet"

# 설명에 나열하는 신호 순서 (동점일 때 우선순위)
SIGNAL_ORDER = ("direct", "similar", "rule")


@dataclass(frozen=True)
class ExplanationInputs:
    """
    설명 생성에 필요한 신호별 값

    contributions는 혼합 가중치가 적용된 최종 점수 기여도이며
    가장 큰 기여도를 가진 신호가 설명의 맨 앞에 옵니다.
    """
    contributions: Dict[str, float]
    direct_strength: Optional[float] = None
    similar_context: Optional[Context] = None
    similar_similarity: float = 0.0
    rule: Optional[AssociationRule] = None


class ExplanationGenerator:
    """
    추천 설명 생성기 클래스 (템플릿 기반)

    기여도가 0보다 큰 신호들(직접 레코드는 항상 포함)을 기여도 순으로 정렬해
    세미콜론으로 이어 붙인 설명 문장을 만듭니다.
    """

    def build_message(self, inputs: ExplanationInputs) -> str:
        """
        신호별 기여도로부터 설명 문장을 생성

        Args:
            inputs: 신호 기여도와 설명용 부가 정보

        Returns:
            주요 신호를 앞에 둔 설명 문자열
        """
        picked: List[str] = [
            self._describe(signal, inputs) for signal in self._ranked_signals(inputs)
        ]
        if not picked:
            return NO_EVIDENCE_REASON
        return "; ".join(picked)

    def _ranked_signals(self, inputs: ExplanationInputs) -> List[str]:
        # 직접 레코드는 강도가 0이어도 근거로 언급
        present = [
            signal
            for signal in SIGNAL_ORDER
            if inputs.contributions.get(signal, 0.0) > 0.0
            or (signal == "direct" and inputs.direct_strength is not None)
        ]
        # 기여도 내림차순, 동점이면 SIGNAL_ORDER 순서 (sort는 안정 정렬)
        return sorted(present, key=lambda signal: -inputs.contributions.get(signal, 0.0))

    def _describe(self, signal: str, inputs: ExplanationInputs) -> str:
        if signal == "direct":
            strength = inputs.direct_strength or 0.0
            return DIRECT_TEMPLATE.format(
                strength_label=self._strength_label(strength),
                strength=strength,
            )
        if signal == "similar":
            context = inputs.similar_context
            name = context.name if context is not None else "a similar context"
            return SIMILAR_TEMPLATE.format(
                context_name=name,
                similarity=inputs.similar_similarity,
            )
        rule = inputs.rule
        return RULE_TEMPLATE.format(
            pattern=rule.describe() if rule is not None else "context",
            confidence=rule.confidence if rule is not None else 0.0,
        )

    @staticmethod
    def _strength_label(strength: float) -> str:
        if strength >= STRONG_HABIT_THRESHOLD:
            return "strong"
        if strength >= MODERATE_HABIT_THRESHOLD:
            return "moderate"
        return "weak"
