import pytest

from cars_demo.data_models import Context, ContextFeature, Interaction
from cars_demo.habit_model import train


def make_context(context_id, **features):
    # features: dimension=value or dimension=(value, weight)
    built = []
    for dimension, spec in features.items():
        value, weight = spec if isinstance(spec, tuple) else (spec, 1.0)
        built.append(ContextFeature(dimension=dimension, value=value, weight=weight))
    return Context(id=context_id, name=context_id.replace("_", " ").title(), features=tuple(built))


@pytest.fixture
def home_evening():
    return make_context("home_evening", time="evening", location="home")


@pytest.fixture
def home_morning():
    return make_context("home_morning", time="morning", location="home")


@pytest.fixture
def office_noon():
    return make_context("office_noon", time="noon", location="office")


@pytest.fixture
def scenario_interactions():
    return [
        Interaction(context_id="home_evening", item_id="movie1", repetition_count=10, rating=4.5),
        Interaction(context_id="home_evening", item_id="movie2", repetition_count=1, rating=2.0),
    ]


@pytest.fixture
def scenario_model(scenario_interactions, home_evening, home_morning):
    return train(scenario_interactions, [home_evening, home_morning])


@pytest.fixture
def context_factory():
    return make_context
