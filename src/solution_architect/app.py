import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import logging
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from solution_architect import config
from solution_architect.context import DOMAIN_TYPES, SCALES, InvalidDecisionError
from solution_architect.orchestrator import SolutionArchitect, create_architect, estimate_analysis_time
from solution_architect.persistence import OUTCOMES, build_decision_record

logger = logging.getLogger("architect.app")


@st.cache_resource
def get_architect() -> SolutionArchitect:
    """Cached architect singleton: one Anthropic client per server process."""
    return create_architect()


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _build_context(options: list[dict]) -> dict:
    """Assemble a decision context from the sidebar and option widgets."""
    return {
        "decision_summary": st.session_state.get("decision_summary", ""),
        "options": options,
        "domain": {
            "type": st.session_state.get("domain_type", "general"),
            "description": st.session_state.get("domain_description", ""),
        },
        "user_context": {
            "personas": _lines(st.session_state.get("personas", "")),
            "primary_goals": _lines(st.session_state.get("primary_goals", "")),
            "pain_points": _lines(st.session_state.get("pain_points", "")),
        },
        "technical_context": {
            "constraints": _lines(st.session_state.get("constraints", "")),
            "scale": st.session_state.get("scale", "medium"),
        },
        "business_context": {
            "urgency": st.session_state.get("urgency", "medium"),
            "budget_constraint": st.session_state.get("budget_constraint", "moderate"),
        },
        "additional_context": st.session_state.get("additional_context", ""),
    }


def _render_result(result: dict) -> None:
    rec = result["recommendation"]
    meta = result["analysis_metadata"]

    st.subheader(f"Recommendation: {rec['recommended_option_name']}")
    col1, col2, col3 = st.columns(3)
    col1.metric("Confidence", f"{rec['confidence']}%")
    col2.metric("Depth", result["analysis_depth"].title())
    col3.metric("Time", f"{meta['total_time_ms'] / 1000:.1f}s")
    st.write(rec["recommendation_rationale"])

    for caveat in rec.get("caveats", []):
        st.warning(caveat)

    if rec["key_factors"]:
        st.markdown("**Key factors**")
        for f in rec["key_factors"]:
            st.markdown(f"- **{f['factor']}** ({f['weight']}): {f['how_option_addresses']}")
    if rec["next_steps"]:
        st.markdown("**Next steps**")
        st.markdown("\n".join(f"1. {s}" for s in rec["next_steps"]))

    framework = result["evaluation_framework"]
    with st.expander(f"Evaluation framework ({len(framework['dimensions'])} dimensions)"):
        st.caption(framework["framework_rationale"])
        for d in framework["dimensions"]:
            st.markdown(f"**{d['name']}**: weight {d['weight']}/10  \n{d['description']}")

    if result["contextual_evaluations"]:
        st.markdown("**Scores**")
        for ev in result["contextual_evaluations"]:
            with st.expander(f"{ev['option_name']} ({ev['overall_score']}/100)"):
                for s in ev["dimension_scores"]:
                    st.markdown(f"- {s['dimension_name']}: **{s['score']}/10**. {s['rationale']}")
                if ev["strengths"]:
                    st.caption("Strengths: " + "; ".join(ev["strengths"]))
                if ev["weaknesses"]:
                    st.caption("Weaknesses: " + "; ".join(ev["weaknesses"]))

    if result["similar_decisions"]:
        with st.expander(f"Similar past decisions ({len(result['similar_decisions'])})"):
            for sd in result["similar_decisions"]:
                outcome = f" ({sd['outcome']})" if sd.get("outcome") else ""
                st.markdown(
                    f"- {sd['decision_summary']} ({sd['similarity_score']}% similar)  \n"
                    f"  Chose **{sd['chosen_option']}**{outcome}"
                )
            insights = result.get("historical_insights")
            if insights:
                st.caption(insights["pattern_observed"])

    st.caption(
        f"Fingerprint {result['fingerprint']['fingerprint_hash']} | "
        f"Phases: {', '.join(meta['phases_completed'])} | Model: {meta['model_used']}"
    )
    st.download_button(
        "Download result as JSON",
        data=json.dumps(result, indent=2),
        file_name=f"decision_{result['fingerprint']['fingerprint_hash']}.json",
        mime="application/json",
    )


st.set_page_config(page_title="Solution Architect", layout="wide")

# --- Sidebar: decision context ---
with st.sidebar:
    st.title("Solution Architect")
    st.selectbox("Domain", DOMAIN_TYPES, index=DOMAIN_TYPES.index("general"), key="domain_type")
    st.text_input("Domain description", key="domain_description")
    st.selectbox("Scale", SCALES, index=SCALES.index("medium"), key="scale")
    st.selectbox("Urgency", ["low", "medium", "high", "critical"], index=1, key="urgency")
    st.selectbox("Budget", ["tight", "moderate", "flexible"], index=1, key="budget_constraint")
    st.text_area("Personas (one per line)", key="personas")
    st.text_area("Primary goals (one per line)", key="primary_goals")
    st.text_area("Pain points (one per line)", key="pain_points")
    st.text_area("Constraints (one per line)", key="constraints")
    st.divider()
    st.checkbox("Force deep analysis", key="force_deep")
    st.checkbox("Skip similar-decision search", key="skip_similar")
    st.caption(f"Decision corpus: {config.DECISIONS_DIR}")

# --- Main: decision and options ---
st.title("Decision Analysis")
st.text_input("What are you deciding?", key="decision_summary",
              placeholder="REST vs GraphQL for the new public API")
st.text_area("Additional context", key="additional_context")

option_count = st.number_input("Number of options", min_value=2, max_value=6, value=2, step=1)
options = []
for i in range(int(option_count)):
    with st.expander(f"Option {i + 1}", expanded=True):
        col1, col2 = st.columns([1, 3])
        option_id = col1.text_input("ID", value=f"option_{i + 1}", key=f"opt_id_{i}")
        name = col2.text_input("Name", key=f"opt_name_{i}")
        description = st.text_area("Description", key=f"opt_desc_{i}")
        col1, col2 = st.columns(2)
        pros = col1.text_area("Pros (one per line)", key=f"opt_pros_{i}")
        cons = col2.text_area("Cons (one per line)", key=f"opt_cons_{i}")
        options.append({
            "id": option_id, "name": name, "description": description,
            "pros": _lines(pros), "cons": _lines(cons),
        })

context = _build_context(options)
estimate = estimate_analysis_time(context)
st.caption(
    f"Estimated time: ~{estimate['quick_scan']}s quick scan, "
    f"~{estimate['standard']}s standard, ~{estimate['deep']}s deep"
)

if st.button("Analyze", type="primary"):
    try:
        with st.spinner("Analyzing options..."):
            st.session_state.last_result = get_architect().analyze_decision(
                context,
                skip_similar_search=st.session_state.get("skip_similar", False),
                force_deep_analysis=st.session_state.get("force_deep", False),
            )
            st.session_state.last_context = context
    except InvalidDecisionError as e:
        st.error(str(e))

result = st.session_state.get("last_result")
if result:
    st.divider()
    _render_result(result)

    # --- Record the decision for future similarity search ---
    st.divider()
    st.subheader("Record this decision")
    option_names = [o["name"] for o in st.session_state.last_context["options"]]
    recommended = result["recommendation"]["recommended_option_name"]
    with st.form("record_decision"):
        chosen = st.selectbox(
            "Option chosen", option_names,
            index=option_names.index(recommended) if recommended in option_names else 0,
        )
        outcome = st.selectbox("Outcome", OUTCOMES, index=OUTCOMES.index("pending"))
        lessons = st.text_area("Lessons learned (one per line)")
        if st.form_submit_button("Save to decision corpus"):
            record = build_decision_record(
                st.session_state.last_context, result,
                chosen_option=chosen, outcome=outcome, lessons_learned=_lines(lessons),
            )
            decision_id = get_architect().repository.save_record(record)
            logger.info("Decision %s recorded from UI", decision_id)
            st.success(f"Saved as {decision_id}")
