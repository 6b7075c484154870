"""
데이터 모델 정의 모듈: CARS 엔진에서 사용되는 핵심 데이터 구조들

이 모듈은 다음 데이터 클래스들을 정의합니다:
- ContextFeature / Context: 상황(컨텍스트)을 구성하는 가중치 특징 벡터
- Interaction: 학습 데이터가 되는 컨텍스트 x 아이템 상호작용 기록
- HabitRecord: (컨텍스트, 아이템) 쌍별 습관 강도
- AssociationRule: "컨텍스트 특징 => 아이템" 형태의 연관 규칙
- RecommendationResult / TransferResult / HabitStatistics: 엔진 출력
- TrainedModel: train() 한 번이 만들어내는 불변 스냅샷
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .config import EngineConfig

# (차원, 값) 쌍. 예: ("time", "evening")
FeatureToken = Tuple[str, str]

# 습관 테이블의 키: (컨텍스트 ID, 아이템 ID)
HabitKey = Tuple[str, str]


@dataclass(frozen=True)
class ContextFeature:
    """
    컨텍스트를 구성하는 하나의 원자적 특징

    차원(시간, 장소, 동반자, 기분, 날씨 등)과 그 값, 그리고 중요도 가중치를 가집니다.
    """
    dimension: str       # 특징 차원 (예: time, location, social)
    value: str           # 범주형 값 (예: evening, home)
    weight: float = 1.0  # 중요도 가중치 (0 이상)

    @property
    def token(self) -> FeatureToken:
        return (self.dimension, self.value)


@dataclass(frozen=True, eq=False)
class Context:
    """
    사용자가 선택을 하는 상황을 나타내는 불변 데이터 클래스

    식별은 id로만 이루어지며, 특징 목록은 생성 순서를 유지하는 튜플로 저장합니다.
    """
    id: str
    name: str
    features: Tuple[ContextFeature, ...] = ()

    def __post_init__(self) -> None:
        # 리스트로 넘겨도 불변 튜플로 고정
        object.__setattr__(self, "features", tuple(self.features))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def tokens(self) -> FrozenSet[FeatureToken]:
        """컨텍스트에 포함된 (차원, 값) 토큰 집합"""
        return frozenset(feature.token for feature in self.features)

    def feature_vector(self) -> Dict[FeatureToken, float]:
        """
        원-핫 인코딩된 희소 벡터를 반환하는 함수

        각 차원은 실제 값에 해당하는 토큰 하나에만 가중치를 싣습니다.

        Returns:
            (차원, 값) -> 가중치 딕셔너리
        """
        return {feature.token: float(feature.weight) for feature in self.features}

    def feature_map(self) -> Dict[str, str]:
        """차원 -> 값 매핑 (UI 표시용)"""
        return {feature.dimension: feature.value for feature in self.features}


@dataclass(frozen=True)
class Interaction:
    """
    학습용 상호작용 기록

    특정 컨텍스트에서 특정 아이템을 몇 번 선택했는지(repetition_count)와
    그에 대한 만족도(rating)를 기록합니다.
    """
    context_id: str
    item_id: str
    repetition_count: int = 1  # 이 컨텍스트에서 아이템을 선택한 횟수
    rating: float = 0.0        # 만족도 (0 ~ rating_max)


@dataclass(frozen=True)
class HabitRecord:
    """
    (컨텍스트, 아이템) 쌍의 습관 강도

    train() 호출 시 전체가 다시 계산되며, 외부에서 수정할 수 없습니다.
    """
    context_id: str
    item_id: str
    repetition: int                   # 누적 반복 횟수 R
    normalized_repetition: float      # 로그 정규화된 반복 R' (0.0-1.0)
    normalized_reinforcement: float   # 정규화된 평점 PR (0.0-1.0)
    strength: float                   # 습관 강도 H (0.0-1.0)


@dataclass(frozen=True)
class AssociationRule:
    """
    IF (컨텍스트 특징들) THEN (아이템) 형태의 연관 규칙

    지지도(support)와 신뢰도(confidence)를 함께 저장하여
    해석 가능한 추천 근거로 사용합니다.
    """
    antecedent: FrozenSet[FeatureToken]
    consequent: str
    support: float
    confidence: float

    def describe(self) -> str:
        """전건을 "evening+home" 형태의 문자열로 표현"""
        return "+".join(value for _, value in sorted(self.antecedent))

    def __str__(self) -> str:
        conditions = " AND ".join(f"{dim}={value}" for dim, value in sorted(self.antecedent))
        return f"IF {conditions} THEN {self.consequent}"


@dataclass(frozen=True)
class RecommendationResult:
    """
    추천 결과 하나

    최종 점수와 함께 사람이 읽을 수 있는 설명,
    그리고 점수 계산에 쓰인 신호별 원시 값을 저장합니다.
    """
    item_id: str
    score: float                  # 최종 점수 (0.0-1.0로 제한)
    explanation: str              # 주요 신호를 설명하는 문장
    signals: Dict[str, float] = field(default_factory=dict)  # direct, similar, rule


@dataclass(frozen=True)
class TransferResult:
    item_id: str
    transfer_score: float   # 원본 강도 x 컨텍스트 유사도
    source_strength: float  # 원본 컨텍스트에서의 습관 강도


@dataclass(frozen=True)
class ItemStrength:
    item_id: str
    strength: float


@dataclass(frozen=True)
class HabitStatistics:
    """습관 테이블 요약 통계"""
    total_habits: int
    avg_habit_strength: float
    top_habits: Tuple[ItemStrength, ...] = ()

    @classmethod
    def empty(cls) -> "HabitStatistics":
        return cls(total_habits=0, avg_habit_strength=0.0, top_habits=())


@dataclass(frozen=True)
class RejectedRecord:
    """학습 중 거부된 입력 레코드와 그 사유"""
    record: Any
    reason: str


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class TrainedModel:
    """
    train()이 생성하는 불변 학습 상태 스냅샷

    습관 테이블, 규칙 집합, 학습에 사용된 컨텍스트를 모두 담고 있으며
    이후의 모든 조회 연산(recommend, transfer_habits, get_habit_statistics)은
    이 스냅샷만을 읽습니다. 재학습은 새 스냅샷으로의 교체입니다.
    """
    config: EngineConfig
    contexts: Mapping[str, Context] = field(default_factory=lambda: _freeze({}))
    habits: Mapping[HabitKey, HabitRecord] = field(default_factory=lambda: _freeze({}))
    rules: Tuple[AssociationRule, ...] = ()
    rejected: Tuple[RejectedRecord, ...] = ()
    is_trained: bool = False
    habits_by_context: Mapping[str, Tuple[HabitRecord, ...]] = field(init=False)
    habits_by_item: Mapping[str, Tuple[HabitRecord, ...]] = field(init=False)

    def __post_init__(self) -> None:
        # 외부에서 내부 딕셔너리를 수정할 수 없도록 읽기 전용 뷰로 감쌈
        object.__setattr__(self, "contexts", _freeze(self.contexts))
        object.__setattr__(self, "habits", _freeze(self.habits))
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "rejected", tuple(self.rejected))

        # 조회용 인덱스: 키 순서로 정렬하여 결정적인 순회를 보장
        by_context: Dict[str, list] = {}
        by_item: Dict[str, list] = {}
        for key in sorted(self.habits):
            record = self.habits[key]
            by_context.setdefault(record.context_id, []).append(record)
            by_item.setdefault(record.item_id, []).append(record)
        object.__setattr__(
            self, "habits_by_context", _freeze({k: tuple(v) for k, v in by_context.items()})
        )
        object.__setattr__(
            self, "habits_by_item", _freeze({k: tuple(v) for k, v in by_item.items()})
        )

    @classmethod
    def empty(cls, config: Optional[EngineConfig] = None) -> "TrainedModel":
        """학습 전 상태를 나타내는 빈 모델"""
        return cls(config=config or EngineConfig())

    def habit(self, context_id: str, item_id: str) -> Optional[HabitRecord]:
        return self.habits.get((context_id, item_id))
