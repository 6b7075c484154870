import streamlit as st
import sys
import os

# Load environment variables from .env file
from pathlib import Path
env_path = Path(__file__).parent / '.env'
if env_path.exists():
    with open(env_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#') and '=' in line:
                key, value = line.split('=', 1)
                os.environ[key.strip()] = value.strip()

# Add src directory to Python path
src_path = os.path.join(os.getcwd(), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from cars_demo.config import EngineConfig
from cars_demo.demo_data import (
    CANDIDATE_ITEMS,
    ITEM_NAMES,
    create_sample_contexts,
    create_sample_interactions,
    create_test_contexts,
)
from cars_demo.engine import HabitEngine
from cars_demo.similarity import context_similarity, shared_features

st.set_page_config(page_title="Compositional Generalization in CARS", page_icon="🧠", layout="wide")

# Initialize session state
if 'engine' not in st.session_state:
    with st.spinner("Training CARS Engine..."):
        engine = HabitEngine(EngineConfig.from_env())
        engine.train(create_sample_interactions(), create_sample_contexts())
    st.session_state.engine = engine
    st.session_state.contexts = create_test_contexts()

engine = st.session_state.engine
contexts = st.session_state.contexts
contexts_by_id = {context.id: context for context in contexts}


def item_name(item_id):
    return ITEM_NAMES.get(item_id, item_id)


def context_label(context_id):
    return contexts_by_id[context_id].name.upper()


# Header
st.title("🧠 Compositional Generalization in CARS")
st.markdown("**Neuro-Symbolic AI for Context-Aware Recommendations**")
st.caption("Habit Model: H = C[B(R + PR)]")

if engine.model.rejected:
    st.warning(f"⚠️ {len(engine.model.rejected)} training records were rejected")

# 1. Context selection
st.header("1. Select Context")
selected_id = st.radio(
    "Context",
    list(contexts_by_id),
    format_func=context_label,
    horizontal=True,
)
selected_context = contexts_by_id[selected_id]

if engine.context(selected_id) is None:
    st.info("🆕 **Novel context**: not seen during training, scored by similarity and rules only")

st.markdown("**Context Feature Vector**")
st.write(" · ".join(
    f"`{feature.dimension}: {feature.value} (w={feature.weight})`"
    for feature in selected_context.features
))

# 2. Recommendations
st.header("2. Context-Aware Recommendations")
limit = st.slider("Number of Recommendations", 1, len(CANDIDATE_ITEMS), 5)
recommendations = engine.recommend(selected_context, CANDIDATE_ITEMS, limit)

if recommendations:
    for i, rec in enumerate(recommendations, 1):
        with st.container():
            col_name, col_score = st.columns([3, 1])
            with col_name:
                st.markdown(f"### {i}. {item_name(rec.item_id)}")
            with col_score:
                st.metric("Score", f"{rec.score * 100:.0f}%")
            st.progress(min(1.0, max(0.0, rec.score)))
            st.info(f"💬 {rec.explanation}")

            # Score breakdown
            with st.expander("📈 Score Breakdown"):
                st.write(f"🎯 **Direct habit**: {rec.signals['direct']:.3f} (this exact context)")
                st.write(f"🔗 **Similar contexts**: {rec.signals['similar']:.3f} (similarity-weighted)")
                st.write(f"📜 **Rules**: {rec.signals['rule']:.3f} (best rule confidence)")
else:
    st.info("No recommendations available for this context")

# 3. Habit statistics
st.header("3. Habit Patterns Analysis")
stats = engine.get_habit_statistics()

col_stat1, col_stat2, col_stat3 = st.columns(3)
with col_stat1:
    st.metric("Total Habits", stats.total_habits)
with col_stat2:
    st.metric("Avg Habit Strength", f"{stats.avg_habit_strength * 100:.1f}%")
with col_stat3:
    st.metric("Association Rules", len(engine.model.rules))

if stats.top_habits:
    st.subheader("Top Habit Strengths by Item")
    st.bar_chart(
        {"strength": {item_name(habit.item_id): round(habit.strength * 100) for habit in stats.top_habits}}
    )

with st.expander("📜 Strongest Rules", expanded=False):
    for rule in engine.model.rules[:10]:
        st.write(
            f"{rule} → **{item_name(rule.consequent)}** "
            f"(support={rule.support:.2f}, confidence={rule.confidence:.2f})"
        )

st.caption(
    "Habit strength is computed as: H = α × log(R+1)/log(CAP+1) + β × PR, where "
    "R is repetition count, PR is positive reinforcement (normalized rating), "
    f"CAP={engine.config.repetition_cap} and α={engine.config.alpha}, β={engine.config.beta}."
)

# 4. Transfer learning
st.header("4. Compositional Transfer Learning")
col_source, col_target = st.columns(2)
context_ids = list(contexts_by_id)
with col_source:
    source_id = st.selectbox("Source Context", context_ids, index=0, format_func=context_label)
with col_target:
    target_id = st.selectbox(
        "Target Context",
        context_ids,
        index=1 if len(context_ids) > 1 else 0,
        format_func=context_label,
    )

source_context = contexts_by_id[source_id]
target_context = contexts_by_id[target_id]
overlap = shared_features(source_context, target_context)
st.write(
    f"**Shared features**: {', '.join(f'{dim}={value}' for dim, value in sorted(overlap)) or 'none'} "
    f"· **Similarity**: {context_similarity(source_context, target_context):.2f}"
)

if st.button("Transfer Habits"):
    transfers = engine.transfer_habits(source_context, target_context)[:5]
    if transfers:
        for transfer in transfers:
            st.write(
                f"**{item_name(transfer.item_id)}**: "
                f"{transfer.source_strength * 100:.0f}% → {transfer.transfer_score * 100:.0f}%"
            )
    else:
        st.info("The source context has no trained habits to transfer.")

# Footer
st.divider()
st.caption("Research Implementation: Compositional Generalization in CARS")
