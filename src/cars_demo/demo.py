from __future__ import annotations

import logging

from .config import EngineConfig
from .demo_data import (
    CANDIDATE_ITEMS,
    ITEM_NAMES,
    create_sample_contexts,
    create_sample_interactions,
    create_test_contexts,
)
from .engine import HabitEngine


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = HabitEngine(EngineConfig.from_env())
    engine.train(create_sample_interactions(), create_sample_contexts())

    print("--- Recommendations ---")
    for context in create_test_contexts():
        print(f"[{context.name}] {context.feature_map()}")
        for rec in engine.recommend(context, CANDIDATE_ITEMS, 3):
            name = ITEM_NAMES.get(rec.item_id, rec.item_id)
            print(f"  {name}: score={rec.score:.3f}")
            print(f"    because {rec.explanation}")
        print()

    print("--- Habit Statistics ---")
    stats = engine.get_habit_statistics()
    print(f"total habits={stats.total_habits}, avg strength={stats.avg_habit_strength:.3f}")
    for habit in stats.top_habits:
        print(f"  {ITEM_NAMES.get(habit.item_id, habit.item_id)}: {habit.strength:.3f}")

    source = engine.context("home_evening")
    target = engine.context("home_morning")
    print(f"\n--- Transfer: {source.name} -> {target.name} ---")
    for result in engine.transfer_habits(source, target):
        name = ITEM_NAMES.get(result.item_id, result.item_id)
        print(f"  {name}: {result.source_strength:.3f} -> {result.transfer_score:.3f}")


if __name__ == "__main__":
    main()
