"""Decision Service for Deep Decision - LLM-driven decision tree analysis.

The analysis grows a tree in three phases:

1. build_initial_tree: one structured call produces the root decision and up
   to `breadth` first-level options.
2. analyze_tree: a depth-bounded walk. Each node below max_depth is expanded
   with one structured call, then all of its children are analyzed
   concurrently; the parent's children list is replaced only after every
   child analysis has finished.
3. extract_insights / generate_report: summarize the finished tree.

Expansion failures never abort the walk: the node simply stays a leaf.
Only a failure to build the initial tree is fatal.
"""

import asyncio
import contextlib
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from deepdecision.core.cancellation import CancellationToken
from deepdecision.core.exceptions import AnalysisCancelledError
from deepdecision.core.models import (
    DEFAULT_DESCRIPTION,
    PROBABILITY_MAX,
    PROBABILITY_MIN,
    RISK_MAX,
    RISK_MIN,
    ConsequencesResponse,
    DecisionNode,
    DecisionProgress,
    DecisionResult,
    FeedbackQuestionsResponse,
    GeneratedNode,
    InitialTreeResponse,
    InsightsResponse,
    ReportResponse,
    new_node_id,
    tree_to_json,
)
from deepdecision.core.prompts import (
    PATH_SEPARATOR,
    decision_system_prompt,
    expand_node_prompt,
    feedback_questions_prompt,
    initial_tree_prompt,
    insights_prompt,
    report_prompt,
)
from deepdecision.interfaces.llm_provider import LLMProvider

ProgressCallback = Callable[[DecisionProgress], None]

# Node types the generator may use at each level
ROOT_OPTION_TYPES = ("chance",)
CONSEQUENCE_TYPES = ("decision", "outcome")

INSIGHTS_FALLBACK = "Unable to extract insights due to an error."


def join_path(path: str, description: str) -> str:
    """Append a node description to an ancestor path."""
    return f"{path}{PATH_SEPARATOR}{description}" if path else description


def _clamp(value: float | None, low: int, high: int) -> float | None:
    if value is None:
        return None
    return max(low, min(high, value))


def _clamp_int(value: float | None, low: int, high: int) -> int | None:
    clamped = _clamp(value, low, high)
    return None if clamped is None else int(round(clamped))


def normalize_node(
    generated: GeneratedNode | dict[str, Any],
    parent_id: str | None,
    default_type: str,
    allowed_types: Iterable[str],
    used_ids: set[str] | None = None,
) -> DecisionNode:
    """Convert generator output into a DecisionNode, defaulting what is missing.

    Args:
        generated: Node as returned by the LLM (model or raw dict)
        parent_id: Id of the true parent (None for the root); always wins over
            whatever parentId the generator claimed
        default_type: Type used when the generated type is missing or not allowed
        allowed_types: Types permitted at this position in the tree
        used_ids: Ids already handed out; generated ids found here are replaced

    Returns:
        Normalized node with no children
    """
    if isinstance(generated, dict):
        generated = GeneratedNode.model_validate(generated)

    node_id = (generated.id or "").strip()
    if not node_id or (used_ids is not None and node_id in used_ids):
        node_id = new_node_id()
    if used_ids is not None:
        used_ids.add(node_id)

    node_type = (generated.type or "").strip().lower()
    if node_type not in allowed_types:
        node_type = default_type

    probability = None
    if node_type == "outcome":
        probability = _clamp(generated.probability, PROBABILITY_MIN, PROBABILITY_MAX)

    return DecisionNode(
        id=node_id,
        description=(generated.description or "").strip() or DEFAULT_DESCRIPTION,
        type=node_type,  # type: ignore[arg-type]
        parent_id=parent_id,
        risk=_clamp_int(generated.risk, RISK_MIN, RISK_MAX),
        opportunity=_clamp_int(generated.opportunity, RISK_MIN, RISK_MAX),
        probability=probability,
    )


def estimate_total_branches(
    node: DecisionNode, max_depth: int, breadth: int, depth: int = 0
) -> int:
    """Predict how many nodes a full analysis will complete.

    Realized children are counted as they are; an unexpanded node below
    max_depth is assumed to grow a full breadth-ary fan of breadth**(levels
    left) nodes. This is a progress denominator only: expansions that return
    fewer children (or fail) make the real count smaller, and unexpanded
    interior levels make it larger.

    Args:
        node: Subtree root
        max_depth: Maximum analysis depth
        breadth: Expected children per expansion
        depth: Depth of node (root = 0)

    Returns:
        Estimated branch count
    """
    if depth >= max_depth:
        return 1

    if node.children:
        return 1 + sum(
            estimate_total_branches(child, max_depth, breadth, depth + 1)
            for child in node.children
        )

    return 1 + breadth ** (max_depth - depth)


class BranchCounter:
    """Completed-branch counter shared by concurrently finishing siblings."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        """Add one and return the new total."""
        with self._lock:
            self._value += 1
            return self._value


@dataclass
class _WalkState:
    """Settings and shared state for one analyze_tree() run."""

    max_depth: int
    breadth: int
    problem: str
    total_branches: int
    counter: BranchCounter
    on_progress: ProgressCallback | None
    cancel_token: CancellationToken
    used_ids: set[str]


class DecisionService:
    """Service for LLM-driven decision tree construction and analysis."""

    def __init__(
        self,
        llm_provider: LLMProvider,
        language: str = "en",
        max_concurrency: int | None = None,
    ):
        """Initialize decision service.

        Args:
            llm_provider: Provider used for every structured generation call
            language: Response language code for the system prompt
            max_concurrency: Optional cap on in-flight generation calls
        """
        self._llm = llm_provider
        self._language = language
        self._semaphore = (
            asyncio.Semaphore(max_concurrency) if max_concurrency else None
        )
        logger.debug("Decision service initialized")

    @property
    def llm_provider(self) -> LLMProvider:
        return self._llm

    async def _generate(self, prompt: str, schema: type[BaseModel]) -> Any:
        """Trim the prompt to the context window and run one structured call."""
        trimmed = self._llm.trim_prompt(prompt)
        guard = self._semaphore or contextlib.nullcontext()
        async with guard:
            return await self._llm.generate_structured(
                decision_system_prompt(self._language), trimmed, schema
            )

    async def generate_feedback_questions(
        self, problem: str, num_questions: int = 3
    ) -> list[str]:
        """Ask the LLM for clarifying questions about a decision problem.

        Raises:
            GenerationError: If the LLM call fails
        """
        if num_questions <= 0:
            return []

        res = await self._generate(
            feedback_questions_prompt(problem, num_questions), FeedbackQuestionsResponse
        )
        questions = [q.strip() for q in res.questions if q and q.strip()]
        logger.info(f"Generated {len(questions)} feedback questions")
        return questions[:num_questions]

    async def build_initial_tree(
        self,
        problem: str,
        breadth: int = 4,
        cancel_token: CancellationToken | None = None,
    ) -> DecisionNode:
        """Generate the root decision and its first-level options.

        Args:
            problem: Decision problem statement
            breadth: Maximum number of options
            cancel_token: Optional cancellation token

        Returns:
            Root node with at most breadth 'chance' children

        Raises:
            GenerationError: If the LLM call fails (no tree exists to degrade to)
        """
        if cancel_token:
            cancel_token.raise_if_cancelled()

        res = await self._generate(
            initial_tree_prompt(problem, breadth), InitialTreeResponse
        )
        generated_root = res.decision_tree

        # Ids only need to be unique within one tree
        used_ids: set[str] = set()
        root = normalize_node(
            generated_root,
            parent_id=None,
            default_type="decision",
            allowed_types=("decision",),
            used_ids=used_ids,
        )
        root.children = self._normalize_children(
            generated_root.children,
            parent=root,
            breadth=breadth,
            default_type="chance",
            allowed_types=ROOT_OPTION_TYPES,
            used_ids=used_ids,
        )

        logger.info(f"Generated initial decision tree with {len(root.children)} options")
        return root

    async def expand_node(
        self,
        node: DecisionNode,
        breadth: int,
        problem: str,
        path: str = "",
        cancel_token: CancellationToken | None = None,
        used_ids: set[str] | None = None,
    ) -> DecisionNode:
        """Generate the consequences of one node.

        A node that already has children is returned untouched. If the LLM call
        fails the error is logged and the node comes back with no children, so
        only this branch stops growing.

        Args:
            node: Node to expand
            breadth: Maximum number of consequences
            problem: Decision problem statement
            path: Ancestor descriptions joined with PATH_SEPARATOR
            cancel_token: Optional cancellation token
            used_ids: Ids already present in the tree (defaults to the node's own)

        Returns:
            The same node, with children populated on success
        """
        if node.children:
            return node

        if cancel_token:
            cancel_token.raise_if_cancelled()

        full_path = join_path(path, node.description)

        try:
            res = await self._generate(
                expand_node_prompt(problem, full_path, breadth), ConsequencesResponse
            )
        except AnalysisCancelledError:
            raise
        except Exception as e:
            logger.warning(f"Error expanding node '{node.description}': {e}")
            return node

        node.children = self._normalize_children(
            res.consequences,
            parent=node,
            breadth=breadth,
            default_type="outcome",
            allowed_types=CONSEQUENCE_TYPES,
            used_ids=used_ids if used_ids is not None else {node.id},
        )

        logger.info(
            f"Expanded node '{node.description}' with {len(node.children)} consequences"
        )
        return node

    def _normalize_children(
        self,
        generated_children: list[Any],
        parent: DecisionNode,
        breadth: int,
        default_type: str,
        allowed_types: Iterable[str],
        used_ids: set[str],
    ) -> list[DecisionNode]:
        """Normalize generated children, dropping malformed entries and extras."""
        children: list[DecisionNode] = []
        for raw in generated_children:
            if not isinstance(raw, (GeneratedNode, dict)):
                logger.debug(f"Skipping malformed child of '{parent.description}': {raw!r}")
                continue
            try:
                children.append(
                    normalize_node(
                        raw,
                        parent_id=parent.id,
                        default_type=default_type,
                        allowed_types=allowed_types,
                        used_ids=used_ids,
                    )
                )
            except ValidationError as e:
                logger.debug(f"Skipping malformed child of '{parent.description}': {e}")

        if len(children) > breadth:
            logger.warning(
                f"Generator returned {len(children)} children for "
                f"'{parent.description}', keeping the first {breadth}"
            )
            children = children[:breadth]

        return children

    async def analyze_tree(
        self,
        root: DecisionNode,
        max_depth: int,
        breadth: int,
        problem: str,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> DecisionNode:
        """Expand a tree concurrently down to max_depth.

        Args:
            root: Tree from build_initial_tree (or any partially expanded tree)
            max_depth: Deepest level that is created (root = 0)
            breadth: Maximum children per expansion
            problem: Decision problem statement
            on_progress: Called synchronously with a fresh snapshot whenever a
                leaf finishes and once more when the root finishes
            cancel_token: Optional token; cancelling it stops further expansion
                and makes this call raise AnalysisCancelledError

        Returns:
            The fully analyzed root
        """
        walk = _WalkState(
            max_depth=max_depth,
            breadth=breadth,
            problem=problem,
            total_branches=estimate_total_branches(root, max_depth, breadth),
            counter=BranchCounter(),
            on_progress=on_progress,
            cancel_token=cancel_token or CancellationToken(),
            used_ids={n.id for n in root.iter_nodes()},
        )
        logger.debug(
            f"Analyzing tree to depth {max_depth} (breadth {breadth}, "
            f"~{walk.total_branches} branches)"
        )

        analyzed = await self._analyze_node(root, depth=0, path="", walk=walk)

        logger.info(
            f"Decision tree analysis complete: {walk.counter.value} branches "
            f"(estimated {walk.total_branches})"
        )
        return analyzed

    async def _analyze_node(
        self, node: DecisionNode, depth: int, path: str, walk: _WalkState
    ) -> DecisionNode:
        current_path = join_path(path, node.description)

        if depth >= walk.max_depth:
            # Terminal nodes are leaves even if the tree arrived pre-expanded
            node.children = []
            self._complete_branch(walk, depth, current_path, emit=True)
            return node

        expanded = await self.expand_node(
            node, walk.breadth, walk.problem, path, walk.cancel_token, walk.used_ids
        )

        if expanded.children:
            walk.cancel_token.raise_if_cancelled()
            children = list(expanded.children)
            results = await asyncio.gather(
                *(
                    self._analyze_node(child, depth + 1, current_path, walk)
                    for child in children
                ),
                return_exceptions=True,
            )

            analyzed: list[DecisionNode] = []
            cancelled: BaseException | None = None
            for child, result in zip(children, results):
                if isinstance(result, (AnalysisCancelledError, asyncio.CancelledError)):
                    cancelled = cancelled or result
                elif isinstance(result, BaseException):
                    logger.error(
                        f"Analysis failed for '{child.description}': {result}"
                    )
                    analyzed.append(child)
                else:
                    analyzed.append(result)

            if cancelled is not None:
                raise cancelled

            expanded.children = analyzed

        # Leaves (including failed expansions) and the root report progress
        self._complete_branch(
            walk, depth, current_path, emit=not expanded.children or depth == 0
        )
        return expanded

    def _complete_branch(
        self, walk: _WalkState, depth: int, current_path: str, emit: bool
    ) -> None:
        completed = walk.counter.increment()
        if not emit or walk.on_progress is None:
            return

        progress = DecisionProgress(
            current_depth=depth,
            total_depth=walk.max_depth,
            total_branches=walk.total_branches,
            completed_branches=completed,
            current_branch=current_path,
        )
        try:
            walk.on_progress(progress)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    async def extract_insights(self, problem: str, tree: DecisionNode) -> list[str]:
        """Extract key insights from an analyzed tree.

        Returns a single placeholder insight if the LLM call fails.
        """
        try:
            res = await self._generate(
                insights_prompt(problem, tree_to_json(tree)), InsightsResponse
            )
        except Exception as e:
            logger.warning(f"Error extracting key insights: {e}")
            return [INSIGHTS_FALLBACK]

        insights = [i.strip() for i in res.insights if i and i.strip()]
        logger.info(f"Generated {len(insights)} key insights")
        return insights

    async def generate_report(
        self, problem: str, tree: DecisionNode, insights: list[str]
    ) -> str:
        """Generate a markdown report for an analyzed tree.

        Returns a minimal report containing the error if the LLM call fails.
        """
        try:
            res = await self._generate(
                report_prompt(problem, tree_to_json(tree), insights), ReportResponse
            )
        except Exception as e:
            logger.warning(f"Error generating decision report: {e}")
            return f"# Decision Analysis Report\n\nError generating report: {e}"

        return res.report

    async def analyze_decision(
        self,
        problem: str,
        depth: int,
        breadth: int = 4,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> DecisionResult:
        """Run the full pipeline: initial tree, expansion and insights.

        Raises:
            GenerationError: If the initial tree cannot be generated
            AnalysisCancelledError: If cancel_token is cancelled mid-run
        """
        logger.info(f"Starting decision analysis (depth={depth}, breadth={breadth})")

        initial_tree = await self.build_initial_tree(problem, breadth, cancel_token)
        decision_tree = await self.analyze_tree(
            initial_tree,
            max_depth=depth,
            breadth=breadth,
            problem=problem,
            on_progress=on_progress,
            cancel_token=cancel_token,
        )
        insights = await self.extract_insights(problem, decision_tree)

        return DecisionResult(decision_tree=decision_tree, insights=insights)
