from cars_demo import demo
from cars_demo.demo_data import (
    CANDIDATE_ITEMS,
    ITEM_NAMES,
    create_sample_contexts,
    create_sample_interactions,
    create_test_contexts,
)
from cars_demo.habit_model import train


def test_sample_data_trains_cleanly():
    model = train(create_sample_interactions(), create_sample_contexts())
    assert model.rejected == ()
    assert len(model.habits) > 0
    assert len(model.rules) > 0
    assert set(CANDIDATE_ITEMS) == set(ITEM_NAMES)


def test_test_contexts_include_novel_ones():
    trained = {context.id for context in create_sample_contexts()}
    novel = [context for context in create_test_contexts() if context.id not in trained]
    assert novel


def test_demo_main_prints_sections(capsys, monkeypatch):
    for variable in ("CARS_ALPHA", "CARS_BETA", "CARS_NONZERO_ONLY"):
        monkeypatch.delenv(variable, raising=False)
    demo.main()
    output = capsys.readouterr().out
    assert "--- Recommendations ---" in output
    assert "--- Habit Statistics ---" in output
    assert "Home Evening -> Home Morning" in output
