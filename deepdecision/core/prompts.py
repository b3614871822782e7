"""Prompt templates for decision analysis."""

from datetime import datetime, timezone

SUPPORTED_LANGUAGES: dict[str, str] = {
    "zh": "Chinese (中文)",
    "en": "English",
    "jp": "Japanese (日本語)",
    "fr": "French (Français)",
    "de": "German (Deutsch)",
    "es": "Spanish (Español)",
    "ru": "Russian (Русский)",
}

PATH_SEPARATOR = " → "


def response_instruction(language: str) -> str:
    """Instruction pinning the response language; unknown codes mean English."""
    name = SUPPORTED_LANGUAGES.get(language.lower(), SUPPORTED_LANGUAGES["en"])
    return f"You must always respond in {name} language only."


def decision_system_prompt(language: str = "en", now: datetime | None = None) -> str:
    """System prompt that frames the model as a decision analyst."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    return f"""You are an expert decision analyst. Today is {timestamp}. {response_instruction(language)} Follow these instructions when analyzing decisions:
  - Think deeply and systematically about complex decisions.
  - Consider multiple perspectives and stakeholders.
  - Thoroughly analyze risks, opportunities, and potential consequences.
  - Include both short-term and long-term implications.
  - Be highly organized and structured in your analysis.
  - Identify decision factors that the user might not have considered.
  - Be objective and avoid cognitive biases.
  - Provide frameworks for evaluating trade-offs.
  - Consider uncertainty and probabilistic outcomes.
  - Identify critical decision points and key dependencies.
  - Suggestions should be actionable and practical.
  - Be thorough in your analysis of the decision tree branches.
  - Focus on the most important factors that will influence the decision.
  - Provide balanced analysis, not just confirmation of existing viewpoints.
"""


def feedback_questions_prompt(problem: str, num_questions: int) -> str:
    return f"""Given the following decision problem, generate {num_questions} follow-up questions to better understand the context, constraints, and preferences:

<problem>{problem}</problem>

The questions should help clarify:
- Key stakeholders and their interests
- Constraints and limitations
- Decision criteria and priorities
- Resources available
- Timeline considerations
- Risk tolerance
- Previous related decisions

Ask thoughtful, open-ended questions that will provide valuable context for analyzing this decision."""


def initial_tree_prompt(problem: str, breadth: int) -> str:
    return f"""Given this decision problem, generate a structured decision tree with {breadth} initial options:

<problem>{problem}</problem>

The root node should represent the main decision, and each child node should represent a distinct option or approach.

For each option, assess:
- A clear description of the option
- Risk level (1-10 scale, 10 being highest risk)
- Opportunity level (1-10 scale, 10 being highest opportunity)

Each option should be distinct and meaningful - represent truly different approaches, not just variations of the same approach.

Generate ONLY the initial options (at most {breadth}) - do not explore any second-level consequences yet. Keep the description of each option concise."""


def expand_node_prompt(problem: str, path: str, breadth: int) -> str:
    return f"""For the following decision problem:

<problem>{problem}</problem>

Given the current decision path:
{path}

Please analyze the potential outcomes of this option. Generate up to {breadth} distinct, meaningful consequences or follow-up decisions that would naturally flow from this option.

For each consequence/follow-up:

- If it's a follow-up decision that requires further choices, label it as a "decision" type and describe the new decision to be made
- If it's a chance event or outcome, label it as an "outcome" type and describe what happens
- For chance outcomes, assess the probability (0-100%) of that outcome occurring
- For all outcomes, evaluate both the risk level (1-10) and opportunity level (1-10)

Ensure that:
- Each consequence is distinct and meaningful
- The set of consequences covers the most important possible developments
- Descriptions are concise but clear
- Together they represent a reasonable distribution of what might happen next"""


def insights_prompt(problem: str, tree_json: str) -> str:
    return f"""Based on the following decision problem and analysis, extract 5-8 key insights that emerge from the analysis.

<problem>{problem}</problem>

<decision_tree>{tree_json}</decision_tree>

An insight should be a meaningful observation about the decision that isn't immediately obvious, such as:
- Patterns across different options
- Hidden risks or opportunities
- Critical dependencies or factors
- Counter-intuitive findings
- Strategic implications

Each insight should be expressed as a clear, concise statement (1-2 sentences)."""


def report_prompt(problem: str, tree_json: str, insights: list[str]) -> str:
    joined_insights = "\n".join(insights)
    return f"""Generate a structured markdown report for the following decision analysis:

<problem>{problem}</problem>

<decision_tree>{tree_json}</decision_tree>

<insights>
{joined_insights}
</insights>

Create a comprehensive report that follows the following structure:

1. Executive Summary - brief overview of the decision problem and main insights
2. Decision Context - more detailed explanation of the decision problem and relevant context
3. Analysis Methodology - brief explanation of the approach used to analyze the decision
4. Key Options:
   - For each major option from the decision tree, create a subsection with:
     - Description of the option
     - Risk and opportunity assessment
     - Key potential outcomes
     - Insights specific to this option
5. Comparative Analysis - compare the options based on risk, opportunity, and outcomes
6. Key Insights - list all the key insights from the analysis
7. Recommendations - provide clear recommendations based on the analysis

Use proper markdown formatting and structure."""
