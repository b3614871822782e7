"""Decision tree domain models and structured-generation schemas.

DecisionNode, DecisionProgress and DecisionResult are the in-memory types
handed to callers. The pydantic models below them describe what the LLM is
asked to return; they are deliberately lenient so partially conformant
output is repaired during normalization instead of rejected.
"""

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

NodeType = Literal["decision", "chance", "outcome"]
NODE_TYPES: tuple[str, ...] = ("decision", "chance", "outcome")

DEFAULT_DESCRIPTION = "Unnamed option"

RISK_MIN, RISK_MAX = 1, 10
PROBABILITY_MIN, PROBABILITY_MAX = 0, 100


def new_node_id() -> str:
    """Generate a fresh node identifier."""
    return str(uuid.uuid4())


@dataclass
class DecisionNode:
    """Vertex in a decision tree: a choice, a chance event or an outcome."""

    id: str = field(default_factory=new_node_id)
    description: str = DEFAULT_DESCRIPTION
    type: NodeType = "decision"
    parent_id: str | None = None
    risk: int | None = None
    opportunity: int | None = None
    probability: float | None = None  # Only meaningful for outcome nodes
    children: list["DecisionNode"] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def iter_nodes(self):
        """Yield this node and all descendants in depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count_nodes(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def max_depth(self) -> int:
        """Depth of the deepest descendant (root = 0)."""
        if not self.children:
            return 0
        return 1 + max(child.max_depth() for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase wire format."""
        data: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "type": self.type,
            "parentId": self.parent_id,
        }
        if self.risk is not None:
            data["risk"] = self.risk
        if self.opportunity is not None:
            data["opportunity"] = self.opportunity
        if self.probability is not None:
            data["probability"] = self.probability
        data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DecisionNode":
        """Deserialize from the wire format produced by to_dict()."""
        node_type = data.get("type")
        node = cls(
            id=data.get("id") or new_node_id(),
            description=data.get("description") or DEFAULT_DESCRIPTION,
            type=node_type if node_type in NODE_TYPES else "decision",
            parent_id=data.get("parentId"),
            risk=data.get("risk"),
            opportunity=data.get("opportunity"),
            probability=data.get("probability"),
        )
        node.children = [cls.from_dict(child) for child in data.get("children") or []]
        return node


@dataclass(frozen=True)
class DecisionProgress:
    """Immutable snapshot emitted while a tree is being analyzed."""

    current_depth: int
    total_depth: int
    total_branches: int
    completed_branches: int
    current_branch: str | None = None

    @property
    def percent_complete(self) -> int:
        """Completion percentage against the estimated branch total.

        The total is an estimate made before expansion, so this may stop
        short of (or briefly exceed) 100; it is clamped for display.
        """
        if self.total_branches <= 0:
            return 0
        return min(100, (self.completed_branches * 100) // self.total_branches)


@dataclass
class DecisionResult:
    """Outcome of a full decision analysis."""

    decision_tree: DecisionNode
    insights: list[str] = field(default_factory=list)


def tree_to_json(tree: DecisionNode, indent: int = 2) -> str:
    return json.dumps(tree.to_dict(), indent=indent, ensure_ascii=False)


def tree_from_json(payload: str) -> DecisionNode:
    return DecisionNode.from_dict(json.loads(payload))


# Structured generation schemas


def _lenient_number(value: Any) -> Any:
    """Turn values that cannot be read as numbers into None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip().rstrip("%"))
        except ValueError:
            return None
    return None


class GeneratedNode(BaseModel):
    """A node as produced by the LLM; any field may be missing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, description="UUID of this node")
    description: str | None = Field(
        default=None, description="Concise description of this decision or outcome"
    )
    type: str | None = Field(
        default=None, description="Node type: 'decision', 'chance' or 'outcome'"
    )
    parent_id: str | None = Field(
        default=None, alias="parentId", description="ID of the parent node"
    )
    risk: float | None = Field(
        default=None, description="Risk assessment (1-10, 10 being highest risk)"
    )
    opportunity: float | None = Field(
        default=None,
        description="Opportunity assessment (1-10, 10 being highest opportunity)",
    )
    probability: float | None = Field(
        default=None,
        description="Probability (0-100%) - only for 'outcome' type nodes",
    )
    children: list[Any] = Field(
        default_factory=list, description="Child nodes - should be empty at this stage"
    )

    @field_validator("risk", "opportunity", "probability", mode="before")
    @classmethod
    def _coerce_number(cls, v: Any) -> Any:
        return _lenient_number(v)

    @field_validator("id", "description", "type", "parent_id", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("children", mode="before")
    @classmethod
    def _coerce_children(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []


class InitialTreeResponse(BaseModel):
    """Root decision plus its first-level options."""

    model_config = ConfigDict(populate_by_name=True)

    decision_tree: GeneratedNode = Field(
        alias="decisionTree",
        description=(
            "The decision tree with the root decision (type 'decision', null "
            "parentId) and its initial options as 'chance' children"
        ),
    )


class ConsequencesResponse(BaseModel):
    """Consequences or follow-up decisions for one node."""

    consequences: list[GeneratedNode] = Field(
        default_factory=list,
        description="Distinct consequences ('outcome') or follow-up decisions ('decision')",
    )


class FeedbackQuestionsResponse(BaseModel):
    questions: list[str] = Field(
        default_factory=list,
        description="Follow-up questions to understand the decision context better",
    )


class InsightsResponse(BaseModel):
    insights: list[str] = Field(
        default_factory=list, description="Key insights from the decision analysis"
    )


class ReportResponse(BaseModel):
    report: str = Field(description="Complete markdown report for the decision analysis")
