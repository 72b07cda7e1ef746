"""Prompt assembly: explicit fields in, prompt text out.

Every builder renders its template in a single str.format() call, so a
value that happens to contain another field's name can't be substituted
twice.
"""

from .prompts import (
    DEEP_ANALYSIS_USER_PROMPT,
    FRAMEWORK_USER_PROMPT,
    QUICK_SCAN_USER_PROMPT,
)

NOT_SPECIFIED = "Not specified"
MAX_SIMILAR_IN_PROMPT = 3


def _joined(items: list[str], empty: str = NOT_SPECIFIED) -> str:
    return ", ".join(items) if items else empty


def format_option_line(option: dict, include_pros_cons: bool = False) -> str:
    """One-line option summary: '- Name: description [Pros: ...] [Cons: ...]'"""
    line = f"- {option['name']} (ID: {option['id']}): {option['description'] or 'No description'}"
    if include_pros_cons:
        if option["pros"]:
            line += f" [Pros: {', '.join(option['pros'])}]"
        if option["cons"]:
            line += f" [Cons: {', '.join(option['cons'])}]"
    return line


def format_option_block(option: dict) -> str:
    parts = [
        f"### {option['name']} (ID: {option['id']})",
        option["description"] or "No description provided",
    ]
    if option["pros"]:
        parts.append(f"Pros: {', '.join(option['pros'])}")
    if option["cons"]:
        parts.append(f"Cons: {', '.join(option['cons'])}")
    if option["implementation_notes"]:
        parts.append(f"Implementation notes: {option['implementation_notes']}")
    return "\n".join(parts)


def format_dimension_block(dimension: dict) -> str:
    return (
        f"### {dimension['name']} (ID: {dimension['id']}, Weight: {dimension['weight']}/10)\n"
        f"{dimension['description']}\n"
        f"Measurement: {dimension['measurement_criteria']}\n"
        f"Relevance: {dimension['why_relevant']}"
    )


def format_similar_decisions(similar_decisions: list[dict]) -> str:
    """Grounding block of past decisions; empty string when there are none."""
    if not similar_decisions:
        return ""
    lines = ["", "## SIMILAR PAST DECISIONS"]
    for sd in similar_decisions[:MAX_SIMILAR_IN_PROMPT]:
        lines.append(f"- \"{sd['decision_summary']}\" ({sd['similarity_score']}% similar)")
        lines.append(f"  Chose: {sd['chosen_option']}")
        if sd.get("outcome"):
            lines.append(f"  Outcome: {sd['outcome']}")
        if sd.get("lessons_learned"):
            lines.append(f"  Lessons: {'; '.join(sd['lessons_learned'])}")
    lines.append("")
    return "\n".join(lines)


def build_quick_scan_prompt(context: dict) -> str:
    return QUICK_SCAN_USER_PROMPT.format(
        decision_summary=context["decision_summary"],
        domain=context["domain"]["type"],
        options="\n".join(format_option_line(o, include_pros_cons=True) for o in context["options"]),
        scale=context["technical_context"]["scale"],
        urgency=context["business_context"]["urgency"] or "medium",
    )


def build_framework_prompt(context: dict) -> str:
    user = context["user_context"]
    technical = context["technical_context"]
    return FRAMEWORK_USER_PROMPT.format(
        decision_summary=context["decision_summary"],
        domain=context["domain"]["type"],
        domain_description=context["domain"]["description"],
        options="\n".join(format_option_line(o) for o in context["options"]),
        stakeholders=_joined(user["personas"]),
        goals=_joined(user["primary_goals"]),
        pain_points=_joined(user["pain_points"]),
        constraints=_joined(technical["constraints"]),
        scale=technical["scale"],
        urgency=context["business_context"]["urgency"] or NOT_SPECIFIED,
    )


def build_deep_analysis_prompt(context: dict, framework: dict, similar_decisions: list[dict]) -> str:
    user = context["user_context"]
    technical = context["technical_context"]
    return DEEP_ANALYSIS_USER_PROMPT.format(
        decision_summary=context["decision_summary"],
        options="\n\n".join(format_option_block(o) for o in context["options"]),
        dimensions="\n\n".join(format_dimension_block(d) for d in framework["dimensions"]),
        domain=context["domain"]["type"],
        scale=technical["scale"],
        stakeholders=_joined(user["personas"]),
        goals=_joined(user["primary_goals"]),
        constraints=_joined(technical["constraints"], empty="None specified"),
        similar_decisions=format_similar_decisions(similar_decisions),
    )
