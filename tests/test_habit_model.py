import logging
import math

import pytest

from cars_demo.config import EngineConfig
from cars_demo.data_models import Context, ContextFeature, Interaction
from cars_demo.habit_model import habit_strength, normalized_repetition, train


def test_habit_strength_matches_formula():
    expected = 0.5 * math.log(11) / math.log(101) + 0.5 * (4.5 / 5.0)
    assert habit_strength(10, 4.5) == pytest.approx(expected)
    assert habit_strength(10, 4.5) == pytest.approx(0.709787, abs=1e-6)


def test_zero_repetition_uses_reinforcement_only():
    assert normalized_repetition(0, EngineConfig()) == 0.0
    assert habit_strength(0, 4.0) == pytest.approx(0.4)


def test_repetition_saturates_at_cap():
    assert habit_strength(100, 5.0) == pytest.approx(1.0)
    assert habit_strength(10_000, 5.0) == pytest.approx(1.0)
    assert normalized_repetition(10_000, EngineConfig()) == 1.0


def test_habit_strength_is_monotonic():
    ratings = [0.0, 1.0, 2.5, 4.0, 5.0]
    repetitions = [0, 1, 2, 5, 10, 50, 100, 500]
    for rating in ratings:
        strengths = [habit_strength(r, rating) for r in repetitions]
        assert strengths == sorted(strengths)
    for repetition in repetitions:
        strengths = [habit_strength(repetition, rating) for rating in ratings]
        assert strengths == sorted(strengths)


def test_custom_coefficients():
    config = EngineConfig(alpha=1.0, beta=0.0)
    assert habit_strength(0, 5.0, config) == 0.0
    assert habit_strength(100, 0.0, config) == pytest.approx(1.0)


def test_train_builds_scenario_habits(scenario_model):
    movie1 = scenario_model.habit("home_evening", "movie1")
    movie2 = scenario_model.habit("home_evening", "movie2")
    assert movie1.strength > movie2.strength
    assert movie1.repetition == 10
    assert movie1.normalized_reinforcement == pytest.approx(0.9)
    assert movie2.strength == pytest.approx(0.275095, abs=1e-6)
    assert scenario_model.is_trained


def test_pairs_without_interactions_have_no_record(scenario_model):
    assert scenario_model.habit("home_morning", "movie1") is None
    assert scenario_model.habit("home_evening", "movie3") is None
    assert len(scenario_model.habits) == 2


def test_repeated_pairs_accumulate(home_evening):
    model = train(
        [
            Interaction("home_evening", "movie1", repetition_count=7, rating=4.5),
            Interaction("home_evening", "movie1", repetition_count=5, rating=3.5),
        ],
        [home_evening],
    )
    record = model.habit("home_evening", "movie1")
    assert len(model.habits) == 1
    assert record.repetition == 12
    assert record.normalized_reinforcement == pytest.approx(0.8)
    assert record.strength == pytest.approx(habit_strength(12, 4.0))


def test_empty_training_produces_empty_model():
    model = train([], [])
    assert model.is_trained
    assert len(model.habits) == 0
    assert model.rules == ()
    assert model.rejected == ()


def test_invalid_records_are_rejected_without_aborting(home_evening, caplog):
    bad_context = Context(id="nowhere", name="Nowhere", features=())
    duplicate = Context(
        id="twice",
        name="Twice",
        features=(ContextFeature("time", "evening"), ContextFeature("time", "morning")),
    )
    negative_weight = Context(id="neg", name="Neg", features=(ContextFeature("time", "x", -1.0),))
    numeric_dimension = Context(
        id="odd",
        name="Odd",
        features=(ContextFeature("time", "evening"), ContextFeature(1, "x")),
    )
    missing_value = Context(id="blank", name="Blank", features=(ContextFeature("time", None),))
    interactions = [
        Interaction("home_evening", "movie1", repetition_count=3, rating=4.0),
        Interaction("home_evening", "movie2", repetition_count=1, rating=6.0),
        Interaction("home_evening", "movie3", repetition_count=-1, rating=3.0),
        Interaction("home_evening", "movie4", repetition_count=True, rating=3.0),
        Interaction("home_evening", "movie5", repetition_count=1, rating=float("nan")),
        Interaction("home_evening", "", repetition_count=1, rating=3.0),
        Interaction("unknown", "movie1", repetition_count=1, rating=3.0),
        Interaction("nowhere", "movie1", repetition_count=1, rating=3.0),
        Interaction("odd", "movie2", repetition_count=1, rating=3.0),
        Interaction("blank", "movie3", repetition_count=1, rating=3.0),
    ]
    contexts = [
        home_evening,
        bad_context,
        duplicate,
        negative_weight,
        numeric_dimension,
        missing_value,
    ]

    with caplog.at_level(logging.WARNING, logger="cars_demo.habit_model"):
        model = train(interactions, contexts)

    assert list(model.habits) == [("home_evening", "movie1")]
    assert set(model.contexts) == {"home_evening"}
    # 5 contexts + 9 interactions
    assert len(model.rejected) == 14
    reasons = " ".join(rejected.reason for rejected in model.rejected)
    assert "no features" in reasons
    assert "repeats dimension" in reasons
    assert "invalid dimension 1" in reasons
    assert "invalid value None" in reasons
    assert "outside scale" in reasons
    assert "unknown context" in reasons
    assert any("Rejected" in message for message in caplog.messages)


def test_retraining_replaces_previous_state(home_evening, home_morning):
    first = train([Interaction("home_evening", "movie1", 3, 4.0)], [home_evening])
    second = train([Interaction("home_morning", "movie2", 1, 2.0)], [home_morning])
    assert first.habit("home_evening", "movie1") is not None
    assert second.habit("home_evening", "movie1") is None
    assert list(second.habits) == [("home_morning", "movie2")]


def test_trained_model_is_read_only(scenario_model):
    with pytest.raises(TypeError):
        scenario_model.habits[("home_evening", "movie9")] = None
    with pytest.raises(AttributeError):
        scenario_model.rules = ()


def test_indexes_group_records(scenario_model):
    by_context = scenario_model.habits_by_context["home_evening"]
    assert [record.item_id for record in by_context] == ["movie1", "movie2"]
    assert [record.context_id for record in scenario_model.habits_by_item["movie1"]] == ["home_evening"]
