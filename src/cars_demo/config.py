"""엔진 설정 모듈: 습관 모델, 규칙 마이닝, 추천 혼합 가중치 설정값"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

# 습관 강도 H = alpha * R' + beta * PR 의 기본 계수
DEFAULT_ALPHA = 0.5
DEFAULT_BETA = 0.5

# 반복 횟수 포화 상수: log(R + 1) / log(CAP + 1)
DEFAULT_REPETITION_CAP = 100

# 평점 척도의 최대값 (0 ~ 5)
DEFAULT_RATING_MAX = 5.0

# 연관 규칙 임계값
DEFAULT_MIN_SUPPORT = 0.05
DEFAULT_MIN_CONFIDENCE = 0.3
DEFAULT_MAX_ANTECEDENT_SIZE = 2

# 추천 점수 혼합 가중치
# 직접 증거(정확히 같은 컨텍스트의 습관)가 있으면 70%를 차지하고,
# 나머지는 유사 컨텍스트 신호와 규칙 신호가 6:4로 나눠 가짐
DEFAULT_DIRECT_WEIGHT = 0.7
DEFAULT_SIMILARITY_WEIGHT = 0.6
DEFAULT_RULE_WEIGHT = 0.4

# 환경변수 이름 -> 설정 필드 이름
ENV_VARIABLES = {
    "CARS_ALPHA": "alpha",
    "CARS_BETA": "beta",
    "CARS_REPETITION_CAP": "repetition_cap",
    "CARS_RATING_MAX": "rating_max",
    "CARS_MIN_SUPPORT": "min_support",
    "CARS_MIN_CONFIDENCE": "min_confidence",
    "CARS_MAX_ANTECEDENT": "max_antecedent_size",
    "CARS_DIRECT_WEIGHT": "direct_weight",
    "CARS_SIMILARITY_WEIGHT": "similarity_weight",
    "CARS_RULE_WEIGHT": "rule_weight",
    "CARS_NONZERO_ONLY": "nonzero_only",
}


@dataclass(frozen=True)
class EngineConfig:
    """
    CARS 엔진 설정값

    기본값은 참조 동작(alpha=beta=0.5, CAP=100, 평점 5점 척도)과 같습니다.
    잘못된 값은 생성 시점에 ValueError로 거부됩니다.
    """
    alpha: float = DEFAULT_ALPHA
    beta: float = DEFAULT_BETA
    repetition_cap: int = DEFAULT_REPETITION_CAP
    rating_max: float = DEFAULT_RATING_MAX
    min_support: float = DEFAULT_MIN_SUPPORT
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    max_antecedent_size: int = DEFAULT_MAX_ANTECEDENT_SIZE
    direct_weight: float = DEFAULT_DIRECT_WEIGHT
    similarity_weight: float = DEFAULT_SIMILARITY_WEIGHT
    rule_weight: float = DEFAULT_RULE_WEIGHT
    nonzero_only: bool = False  # True면 점수 0인 후보를 추천 결과에서 제외

    def __post_init__(self) -> None:
        for name in ("alpha", "beta", "min_support", "min_confidence",
                     "similarity_weight", "rule_weight"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number, got {value!r}")
        if self.repetition_cap < 1:
            raise ValueError(f"repetition_cap must be >= 1, got {self.repetition_cap!r}")
        if not math.isfinite(self.rating_max) or self.rating_max <= 0:
            raise ValueError(f"rating_max must be positive, got {self.rating_max!r}")
        if self.max_antecedent_size < 1:
            raise ValueError(
                f"max_antecedent_size must be >= 1, got {self.max_antecedent_size!r}"
            )
        # 직접 증거 가중치가 0이면 간접 신호가 직접 증거를 완전히 덮어쓰게 됨
        if not 0.0 < self.direct_weight <= 1.0:
            raise ValueError(f"direct_weight must be in (0, 1], got {self.direct_weight!r}")
        if self.similarity_weight + self.rule_weight <= 0:
            raise ValueError("similarity_weight + rule_weight must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        CARS_* 환경변수로 기본값을 덮어쓴 설정을 만드는 함수

        Args:
            environ: 조회할 환경변수 매핑 (None이면 os.environ 사용)

        Returns:
            환경변수가 반영된 EngineConfig
        """
        environ = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        overrides = {}
        for variable, name in ENV_VARIABLES.items():
            raw = environ.get(variable)
            if raw is None or not raw.strip():
                continue
            raw = raw.strip()
            # from __future__ annotations 때문에 타입은 문자열로 저장됨
            kind = types[name]
            if kind == "bool":
                overrides[name] = raw.lower() in ("1", "true", "yes", "on")
            elif kind == "int":
                overrides[name] = int(raw)
            else:
                overrides[name] = float(raw)
        return cls(**overrides)
