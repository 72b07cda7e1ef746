QUICK_SCAN_PROMPT = """You are doing a QUICK initial assessment of a decision. Your goal is to determine if there's an obvious winner or if deep analysis is needed.

TASK: Quickly assess the options and determine:
1. Is there a clearly dominant option? (>=85% confidence, >=20 point margin over the runner-up)
2. What depth of analysis is needed?

OUTPUT FORMAT (JSON only, no other text):
{
    "dominant_option": {
        "id": "option_id or null if no clear winner",
        "name": "option name",
        "confidence": 92,
        "margin_over_second": 25,
        "quick_rationale": "One sentence why this is clearly better"
    },
    "needs_deep_analysis": false,
    "analysis_depth_recommended": "quick|standard|deep",
    "quick_signals": ["Signal 1 that informed this assessment", "Signal 2"],
    "estimated_complexity": "straightforward|moderate|complex"
}

Use the option IDs exactly as given. Be decisive. If it's obvious, say so. If it's not, set dominant_option to null and recommend deeper analysis."""

QUICK_SCAN_USER_PROMPT = """Decision: {decision_summary}
Domain: {domain}
Options:
{options}
Scale: {scale}
Urgency: {urgency}
"""

FRAMEWORK_GENERATION_PROMPT = """You are an expert at designing evaluation frameworks for decisions.

Given a decision context, generate 4-6 SPECIFIC evaluation dimensions that are most relevant to THIS decision.

IMPORTANT:
- Do NOT use generic dimensions like "scalability" or "maintainability" unless they are specifically relevant
- Each dimension should directly relate to the decision at hand
- Dimensions should help differentiate between the options
- Think about what the stakeholders actually care about

OUTPUT FORMAT:
Return valid JSON with this structure:
{
    "dimensions": [
        {
            "id": "dimension_id",
            "name": "Specific Dimension Name",
            "description": "What this measures",
            "weight": 8,
            "measurement_criteria": "How to score options on this (1-10)",
            "why_relevant": "Why this matters for this specific decision"
        }
    ],
    "framework_rationale": "Why these dimensions were chosen for this decision"
}"""

FRAMEWORK_USER_PROMPT = """Generate a contextual evaluation framework for this decision:

Decision: {decision_summary}

Domain: {domain}
{domain_description}

Options:
{options}

Stakeholders: {stakeholders}
Goals: {goals}
Pain Points: {pain_points}
Constraints: {constraints}
Scale: {scale}
Urgency: {urgency}
"""

DEEP_ANALYSIS_PROMPT = """You are a Principal Solution Architect analyzing a decision using a CONTEXTUAL evaluation framework.

IMPORTANT: Use ONLY the provided evaluation dimensions. Do NOT add generic dimensions.

For each option, score it on EACH provided dimension (1-10) with specific rationale.

OUTPUT FORMAT (JSON):
{
    "recommendation": {
        "recommended_option_id": "id",
        "recommended_option_name": "name",
        "confidence": 85,
        "recommendation_rationale": "Clear explanation",
        "key_factors": [
            {"factor": "Specific factor", "weight": "critical|important|nice_to_have", "how_option_addresses": "How"}
        ],
        "next_steps": ["Step 1", "Step 2"],
        "caveats": ["Any warnings"]
    },
    "contextual_evaluations": [
        {
            "option_id": "id",
            "option_name": "name",
            "dimension_scores": [
                {"dimension_id": "dim_id", "dimension_name": "Dimension Name", "score": 8, "rationale": "Why this score"}
            ],
            "overall_score": 75,
            "strengths": ["Strength 1"],
            "weaknesses": ["Weakness 1"]
        }
    ]
}"""

DEEP_ANALYSIS_USER_PROMPT = """## DECISION
{decision_summary}

## OPTIONS
{options}

## EVALUATION FRAMEWORK
Use ONLY these dimensions to evaluate each option:

{dimensions}

## CONTEXT
Domain: {domain}
Scale: {scale}
Stakeholders: {stakeholders}
Goals: {goals}
Constraints: {constraints}
{similar_decisions}
Analyze each option using ONLY the provided evaluation dimensions.
"""
