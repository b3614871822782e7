"""Decision analysis route handlers.

Provides endpoints:
- POST /api/feedback-questions - Clarifying questions for a problem
- POST /api/analyze-decision - Run a full analysis and persist the results
- GET /api/decision-report - Last saved report
- GET /api/decision-tree - Last saved tree
- GET /api/model-info - Active model and provider
- GET /api/health - LLM provider reachability
"""

import json
from typing import Any

from loguru import logger
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from deepdecision.context import AppContext


def _get_context(request: Request) -> AppContext:
    """Get application context from app state."""
    return request.app.state.context


async def _read_body(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


def _positive_int(value: Any, default: int) -> int | None:
    """Parse an optional positive integer field; None means invalid."""
    if value is None:
        return default
    if isinstance(value, bool):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


async def feedback_questions(request: Request) -> JSONResponse:
    """POST /api/feedback-questions - Generate clarifying questions.

    Body:
        {"problem": "...", "numQuestions": 3}

    Returns:
        200: {"success": true, "questions": [...]}
        400: Missing problem or invalid numQuestions.
        500: Generation failed.

    """
    context = _get_context(request)
    body = await _read_body(request)
    if body is None:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    problem = body.get("problem")
    if not problem:
        return JSONResponse({"error": "Decision problem is required"}, status_code=400)

    num_questions = _positive_int(
        body.get("numQuestions"), context.config.decision.default_questions
    )
    if num_questions is None:
        return JSONResponse(
            {"error": "numQuestions must be a positive integer"}, status_code=400
        )

    try:
        questions = await context.decision_service.generate_feedback_questions(
            problem, num_questions
        )
    except Exception as e:
        logger.error(f"Feedback question generation failed: {e}")
        return JSONResponse(
            {
                "error": "Error while generating feedback questions",
                "message": str(e),
            },
            status_code=500,
        )

    return JSONResponse({"success": True, "questions": questions})


async def analyze_decision(request: Request) -> JSONResponse:
    """POST /api/analyze-decision - Run decision analysis.

    Body:
        {"problem": "...", "depth": 3, "breadth": 4}

    Returns:
        200: {"success": true, "report": ..., "insights": [...], "decisionTree": {...}}
        400: Missing problem or invalid depth/breadth.
        500: Analysis failed.

    """
    context = _get_context(request)
    body = await _read_body(request)
    if body is None:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    problem = body.get("problem")
    if not problem:
        return JSONResponse({"error": "Decision problem is required"}, status_code=400)

    depth = _positive_int(body.get("depth"), context.config.decision.default_depth)
    breadth = _positive_int(body.get("breadth"), context.config.decision.default_breadth)
    if depth is None or breadth is None:
        return JSONResponse(
            {"error": "depth and breadth must be positive integers"}, status_code=400
        )

    service = context.decision_service
    store = context.result_store

    try:
        result = await service.analyze_decision(problem, depth=depth, breadth=breadth)
        store.save_tree(result.decision_tree)

        report = await service.generate_report(
            problem, result.decision_tree, result.insights
        )
        store.save_report(report)
    except Exception as e:
        logger.error(f"Decision analysis API error: {e}")
        return JSONResponse(
            {
                "error": "Error during decision analysis",
                "message": str(e),
            },
            status_code=500,
        )

    return JSONResponse(
        {
            "success": True,
            "report": report,
            "insights": result.insights,
            "decisionTree": result.decision_tree.to_dict(),
        }
    )


async def get_decision_report(request: Request) -> JSONResponse:
    """GET /api/decision-report - Last saved report (404 if none)."""
    report = _get_context(request).result_store.load_report()
    if report is None:
        return JSONResponse({"error": "Decision report not found"}, status_code=404)
    return JSONResponse({"success": True, "report": report})


async def get_decision_tree(request: Request) -> JSONResponse:
    """GET /api/decision-tree - Last saved tree (404 if none)."""
    try:
        tree = _get_context(request).result_store.load_tree()
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Failed to read saved decision tree: {e}")
        tree = None

    if tree is None:
        return JSONResponse({"error": "Decision tree not found"}, status_code=404)
    return JSONResponse({"success": True, "decisionTree": tree.to_dict()})


async def model_info(request: Request) -> JSONResponse:
    """GET /api/model-info - Active model id and provider type."""
    context = _get_context(request)
    return JSONResponse(
        {"modelId": context.model_id, "providerType": context.provider_name}
    )


async def health(request: Request) -> JSONResponse:
    """GET /api/health - Provider health (503 when the provider is unreachable)."""
    status = await _get_context(request).llm_provider.health_check()
    status_code = 200 if status.get("status") == "healthy" else 503
    return JSONResponse(status, status_code=status_code)


routes = [
    Route("/api/feedback-questions", feedback_questions, methods=["POST"]),
    Route("/api/analyze-decision", analyze_decision, methods=["POST"]),
    Route("/api/decision-report", get_decision_report, methods=["GET"]),
    Route("/api/decision-tree", get_decision_tree, methods=["GET"]),
    Route("/api/model-info", model_info, methods=["GET"]),
    Route("/api/health", health, methods=["GET"]),
]
