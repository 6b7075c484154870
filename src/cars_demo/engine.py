"""
CARS 엔진 모듈: 표현 계층이 사용하는 네 가지 연산을 하나의 객체로 제공

- train: 상호작용 로그로 습관 테이블과 규칙 집합을 새로 구축
- recommend: 컨텍스트별 추천 목록 생성
- get_habit_statistics: 습관 통계 요약
- transfer_habits: 컨텍스트 간 습관 전이

train()은 잠금을 잡은 상태에서 새 스냅샷을 만든 뒤 참조를 교체합니다.
조회 연산은 호출 시점의 스냅샷만 읽으므로 서로 동시에 실행해도 안전합니다.
"""
from __future__ import annotations

import threading
from typing import Iterable, List, Optional, Sequence

from .config import EngineConfig
from .data_models import (
    Context,
    HabitStatistics,
    Interaction,
    RecommendationResult,
    TrainedModel,
    TransferResult,
)
from .habit_model import train as train_model
from .habit_stats import DEFAULT_TOP_N, get_habit_statistics
from .recommendation import HabitRecommender
from .transfer import transfer_habits


class HabitEngine:
    """
    컨텍스트 인식 습관 추천 엔진

    현재 학습 스냅샷(TrainedModel)을 보관하고 각 연산을 스냅샷에 위임합니다.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self._model = TrainedModel.empty(self.config)
        self._train_lock = threading.Lock()

    @property
    def model(self) -> TrainedModel:
        """현재 학습 스냅샷"""
        return self._model

    def train(
        self,
        interactions: Iterable[Interaction],
        contexts: Iterable[Context],
    ) -> TrainedModel:
        """
        엔진을 학습시키고 현재 스냅샷을 교체하는 함수

        이전 학습 결과는 병합 없이 통째로 버려집니다.

        Args:
            interactions: 학습용 상호작용 목록
            contexts: 상호작용이 참조하는 컨텍스트 목록

        Returns:
            새로 만들어진 학습 스냅샷
        """
        with self._train_lock:
            model = train_model(interactions, contexts, self.config)
            self._model = model
        return model

    def recommend(
        self,
        context: Context,
        candidates: Sequence[str],
        k: int,
    ) -> List[RecommendationResult]:
        return HabitRecommender(self._model).recommend(context, candidates, k)

    def get_habit_statistics(self, top_n: Optional[int] = DEFAULT_TOP_N) -> HabitStatistics:
        return get_habit_statistics(self._model, top_n)

    def transfer_habits(self, source: Context, target: Context) -> List[TransferResult]:
        return transfer_habits(self._model, source, target)

    def context(self, context_id: str) -> Optional[Context]:
        """학습에 사용된 컨텍스트를 ID로 조회"""
        return self._model.contexts.get(context_id)
