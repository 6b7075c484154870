"""
컨텍스트 유사도 모듈: 두 컨텍스트 특징 벡터 사이의 가중 코사인 유사도

각 컨텍스트를 (차원, 값) 토큰 위의 희소 벡터로 보고 코사인 유사도를 계산합니다.
- 같은 (차원, 값) 쌍을 많이 공유할수록, 특히 가중치가 큰 특징을 공유할수록 1에 가까움
- 공유하는 특징이 없으면 0
- 대칭적이며, 가중치가 모두 0이 아닌 컨텍스트의 자기 유사도는 정확히 1
"""
from __future__ import annotations

from math import isfinite, sqrt
from typing import Dict, FrozenSet

from .data_models import Context, FeatureToken


def context_similarity(a: Context, b: Context) -> float:
    """
    두 컨텍스트의 가중 코사인 유사도를 계산하는 함수

    Args:
        a: 첫 번째 컨텍스트
        b: 두 번째 컨텍스트

    Returns:
        유사도 (0.0-1.0)
    """
    return cosine_similarity(a.feature_vector(), b.feature_vector())


def cosine_similarity(
    vector_a: Dict[FeatureToken, float],
    vector_b: Dict[FeatureToken, float],
) -> float:
    norm_a = sqrt(sum(weight * weight for weight in vector_a.values()))
    norm_b = sqrt(sum(weight * weight for weight in vector_b.values()))
    # NaN/무한대 가중치가 섞인 벡터는 어떤 컨텍스트와도 유사하지 않음
    if not (isfinite(norm_a) and isfinite(norm_b)):
        return 0.0
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    # 동일한 벡터는 부동소수점 오차 없이 1.0
    if vector_a == vector_b:
        return 1.0

    # 공유 토큰을 정렬된 순서로 합산해야 인자 순서와 무관하게 같은 값이 나옴
    shared = sorted(vector_a.keys() & vector_b.keys())
    dot = sum(vector_a[token] * vector_b[token] for token in shared)
    similarity = dot / (norm_a * norm_b)
    if not isfinite(similarity):
        return 0.0
    return max(0.0, min(1.0, similarity))


def shared_features(a: Context, b: Context) -> FrozenSet[FeatureToken]:
    """두 컨텍스트가 공유하는 (차원, 값) 토큰"""
    return a.tokens() & b.tokens()
