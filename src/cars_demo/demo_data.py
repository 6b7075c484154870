from __future__ import annotations

from typing import Dict, List

from .data_models import Context, ContextFeature, Interaction

ITEM_NAMES: Dict[str, str] = {
    "movie1": "Action Hero",
    "movie2": "Thriller Night",
    "movie3": "Romance Forever",
    "movie4": "Family Adventures",
    "movie5": "Comedy Central",
    "movie6": "Drama Tales",
}

CANDIDATE_ITEMS: List[str] = list(ITEM_NAMES)


def _context(context_id: str, **features) -> Context:
    # features: dimension=(value, weight)
    return Context(
        id=context_id,
        name=context_id.replace("_", " ").title(),
        features=tuple(
            ContextFeature(dimension=dimension, value=value, weight=weight)
            for dimension, (value, weight) in features.items()
        ),
    )


def create_sample_contexts() -> List[Context]:
    return [
        _context(
            "home_evening",
            time=("evening", 1.0),
            location=("home", 1.0),
            social=("family", 0.8),
            mood=("relaxed", 0.6),
            weather=("rainy", 0.4),
        ),
        _context(
            "home_morning",
            time=("morning", 1.0),
            location=("home", 1.0),
            social=("alone", 0.8),
            mood=("energetic", 0.6),
            weather=("sunny", 0.4),
        ),
        _context(
            "cinema_weekend",
            time=("afternoon", 1.0),
            location=("cinema", 1.0),
            social=("friends", 0.8),
            mood=("excited", 0.6),
            weather=("sunny", 0.4),
        ),
        _context(
            "work_lunch",
            time=("noon", 1.0),
            location=("work", 1.0),
            social=("colleagues", 0.8),
            mood=("neutral", 0.6),
            weather=("cloudy", 0.4),
        ),
        _context(
            "date_night",
            time=("evening", 1.0),
            location=("cinema", 1.0),
            social=("partner", 0.8),
            mood=("romantic", 0.6),
            weather=("clear", 0.4),
        ),
    ]


def create_test_contexts() -> List[Context]:
    # Training contexts plus novel ones that only share some atomic features
    return create_sample_contexts() + [
        _context(
            "home_night_friends",
            time=("evening", 1.0),
            location=("home", 1.0),
            social=("friends", 0.8),
            mood=("excited", 0.6),
            weather=("clear", 0.4),
        ),
        _context(
            "commute_morning",
            time=("morning", 1.0),
            location=("transit", 1.0),
            social=("alone", 0.8),
            mood=("tired", 0.6),
            weather=("rainy", 0.4),
        ),
    ]


def create_sample_interactions() -> List[Interaction]:
    # (context, item, repetition, rating); repeated pairs are separate sessions
    rows = [
        ("home_evening", "movie1", 7, 4.5),
        ("home_evening", "movie1", 5, 4.5),
        ("home_evening", "movie2", 3, 3.5),
        ("home_evening", "movie4", 6, 4.0),
        ("home_evening", "movie6", 2, 3.0),
        ("home_morning", "movie5", 5, 4.0),
        ("home_morning", "movie4", 3, 3.5),
        ("cinema_weekend", "movie1", 8, 4.8),
        ("cinema_weekend", "movie2", 5, 4.2),
        ("cinema_weekend", "movie2", 1, 3.6),
        ("work_lunch", "movie5", 4, 3.8),
        ("work_lunch", "movie2", 1, 2.0),
        ("date_night", "movie3", 9, 4.7),
        ("date_night", "movie6", 4, 4.1),
        ("date_night", "movie1", 1, 3.0),
    ]
    return [
        Interaction(context_id=context_id, item_id=item_id, repetition_count=repetition, rating=rating)
        for context_id, item_id, repetition, rating in rows
    ]
