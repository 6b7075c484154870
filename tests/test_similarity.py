import itertools

import pytest

from cars_demo.demo_data import create_test_contexts
from cars_demo.similarity import context_similarity, shared_features


def test_similarity_is_symmetric():
    contexts = create_test_contexts()
    for a, b in itertools.combinations(contexts, 2):
        assert context_similarity(a, b) == context_similarity(b, a)


def test_self_similarity_is_exactly_one():
    for context in create_test_contexts():
        assert context_similarity(context, context) == 1.0


def test_partial_overlap(home_evening, home_morning):
    assert context_similarity(home_evening, home_morning) == pytest.approx(0.5)
    assert shared_features(home_evening, home_morning) == frozenset({("location", "home")})


def test_disjoint_contexts_score_zero(home_evening, office_noon):
    assert context_similarity(home_evening, office_noon) == 0.0
    assert shared_features(home_evening, office_noon) == frozenset()


def test_weights_shift_similarity(context_factory):
    base = context_factory("a", time="evening", location="home")
    heavy_home = context_factory("b", time="morning", location=("home", 3.0))
    heavy_time = context_factory("c", time=("morning", 3.0), location="home")
    # sharing a high-weight feature counts more
    assert context_similarity(base, heavy_home) > context_similarity(base, heavy_time)


def test_same_value_different_dimension_does_not_match(context_factory):
    a = context_factory("a", mood="sunny")
    b = context_factory("b", weather="sunny")
    assert context_similarity(a, b) == 0.0


def test_all_zero_weights_is_degenerate(context_factory):
    zero = context_factory("zero", time=("evening", 0.0), location=("home", 0.0))
    other = context_factory("other", time="evening", location="home")
    assert context_similarity(zero, zero) == 0.0
    assert context_similarity(zero, other) == 0.0


def test_similarity_is_bounded():
    contexts = create_test_contexts()
    for a, b in itertools.product(contexts, repeat=2):
        assert 0.0 <= context_similarity(a, b) <= 1.0


def test_non_finite_weights_match_nothing(context_factory):
    broken = context_factory("broken", time=("evening", float("nan")), location="home")
    unbounded = context_factory("unbounded", time=("evening", float("inf")), location="home")
    other = context_factory("other", time="evening", location="home")
    assert context_similarity(broken, other) == 0.0
    assert context_similarity(other, broken) == 0.0
    assert context_similarity(broken, broken) == 0.0
    assert context_similarity(unbounded, other) == 0.0
