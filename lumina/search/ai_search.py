"""
AiFallback - offers an "Ask AI" result. It never talks to the network;
activating the result is what starts a completion session.
"""
from typing import Sequence

from lumina.models import QueryResult, StartCompletion

AI_RESULT_SCORE = 0.7

AI_INDICATORS = (
    "what", "how", "why", "when", "where", "who",
    "explain", "tell me", "help", "?",
)


def is_ai_query(query: str) -> bool:
    """Case-insensitive keyword containment, or a trailing question mark."""
    query_lower = query.lower()
    return any(indicator in query_lower for indicator in AI_INDICATORS) or query.endswith("?")


def create_ai_result(query: str) -> QueryResult:
    return QueryResult(
        id="ai_response",
        title=f"Ask AI: {query}",
        description="Get an AI response to your query",
        icon="🤖",
        action=StartCompletion(prompt=query),
        score=AI_RESULT_SCORE,
    )


class AiFallback:

    def should_offer(self, query: str, sync_results: Sequence[QueryResult]) -> bool:
        # Any query the other providers could not answer becomes an AI query
        return not sync_results or is_ai_query(query)

    def offer(self, query: str) -> QueryResult:
        return create_ai_result(query)
