import pytest

from cars_demo.data_models import HabitStatistics, Interaction, ItemStrength, TrainedModel
from cars_demo.habit_model import habit_strength, train
from cars_demo.habit_stats import get_habit_statistics


def test_empty_training_yields_zeroed_statistics():
    stats = get_habit_statistics(train([], []))
    assert stats == HabitStatistics(total_habits=0, avg_habit_strength=0.0, top_habits=())
    assert get_habit_statistics(TrainedModel.empty()) == HabitStatistics.empty()


def test_counts_and_average(scenario_model):
    stats = get_habit_statistics(scenario_model)
    strengths = [r.strength for r in scenario_model.habits.values()]
    assert stats.total_habits == 2
    assert stats.avg_habit_strength == pytest.approx(sum(strengths) / 2)
    assert [h.item_id for h in stats.top_habits] == ["movie1", "movie2"]


def test_top_habits_use_max_strength_per_item(home_evening, home_morning):
    model = train(
        [
            Interaction("home_evening", "movie1", 1, 1.0),
            Interaction("home_morning", "movie1", 50, 5.0),
            Interaction("home_evening", "movie2", 5, 3.0),
        ],
        [home_evening, home_morning],
    )
    stats = get_habit_statistics(model)
    assert stats.total_habits == 3
    assert stats.top_habits[0] == ItemStrength("movie1", habit_strength(50, 5.0))
    assert len(stats.top_habits) == 2


def test_ties_are_broken_by_item_id(home_evening):
    model = train(
        [
            Interaction("home_evening", "b", 2, 3.0),
            Interaction("home_evening", "a", 2, 3.0),
            Interaction("home_evening", "c", 2, 3.0),
        ],
        [home_evening],
    )
    stats = get_habit_statistics(model)
    assert [h.item_id for h in stats.top_habits] == ["a", "b", "c"]


def test_top_n_truncates(home_evening):
    model = train(
        [Interaction("home_evening", f"item{i}", i, 4.0) for i in range(8)],
        [home_evening],
    )
    assert len(get_habit_statistics(model).top_habits) == 5
    assert len(get_habit_statistics(model, top_n=2).top_habits) == 2
    assert len(get_habit_statistics(model, top_n=None).top_habits) == 8
    assert get_habit_statistics(model, top_n=2).top_habits[0].item_id == "item7"
