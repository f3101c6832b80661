"""
Search Package

Usage:
    from lumina.search import QueryResolver

    results = await QueryResolver().resolve("notes")
"""
from lumina.search.ai_search import AiFallback, create_ai_result, is_ai_query
from lumina.search.calculator import ExpressionEvaluator, evaluate_expression, is_math_expression
from lumina.search.files import FileMatcher, default_search_roots, score_name
from lumina.search.outcome import OutcomeStatus, ProviderOutcome
from lumina.search.resolver import QueryResolver, ResolutionRequest, rank_results

__all__ = [
    "AiFallback",
    "ExpressionEvaluator",
    "FileMatcher",
    "OutcomeStatus",
    "ProviderOutcome",
    "QueryResolver",
    "ResolutionRequest",
    "create_ai_result",
    "default_search_roots",
    "evaluate_expression",
    "is_ai_query",
    "is_math_expression",
    "rank_results",
    "score_name",
]
