"""
Query Resolver - fans one query out to every result provider, merges and
ranks what comes back.

Flow:
1. Blank query → empty list, no provider invoked
2. Blocking providers (files) run concurrently on the shared thread pool and
   stop at the resolution deadline; the calculator runs inline
3. Failed providers contribute nothing (silent degrade)
4. "Ask AI" is appended when nothing matched or the query reads as a question
5. Stable sort by score (descending), truncate to the result limit
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

from lumina.config import load_config, settings
from lumina.models import QueryResult
from lumina.search.ai_search import AiFallback
from lumina.search.calculator import ExpressionEvaluator
from lumina.search.files import FileMatcher
from lumina.search.outcome import ProviderOutcome
from lumina.utils.async_utils import run_in_executor

logger = logging.getLogger(__name__)


class ResultProvider(Protocol):
    """
    `blocking` providers run on the shared pool and receive the resolution
    deadline so they can stop on their own; the rest run inline on the loop.
    """
    blocking: bool

    def search(self, query: str, deadline: Optional[float] = None) -> ProviderOutcome: ...


@dataclass
class ResolutionRequest:
    """One debounced submission; lives only for one `resolve` call."""
    query: str
    budget: float
    started_at: float = field(default_factory=time.monotonic)

    @property
    def deadline(self) -> float:
        return self.started_at + self.budget

    def remaining(self) -> float:
        return max(0.0, self.deadline - time.monotonic())


def rank_results(results: Sequence[QueryResult], limit: int) -> List[QueryResult]:
    """Stable descending sort by score; ties keep emission order."""
    ranked = sorted(results, key=lambda r: r.rank, reverse=True)
    return ranked[:limit]


class QueryResolver:
    """
    Stateless across queries: nothing is cached between `resolve` calls.

    Usage:
        resolver = QueryResolver()
        results = await resolver.resolve("5+5")
    """

    def __init__(
        self,
        providers: Optional[Sequence[ResultProvider]] = None,
        ai_fallback: Optional[AiFallback] = None,
        limit: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if providers is None:
            config = load_config()
            providers = [
                FileMatcher(extra_roots=config.search_directories),
                ExpressionEvaluator(),
            ]
        self.providers: List[ResultProvider] = list(providers)
        self.ai_fallback = ai_fallback or AiFallback()
        self.limit = limit if limit is not None else settings.result_limit
        self.timeout = timeout if timeout is not None else settings.search_timeout

    # ────────────────────────── Public API ──────────────────────────

    async def resolve(self, query: str) -> List[QueryResult]:
        """Never raises; any provider fault degrades to zero results."""
        if not query.strip():
            return []

        request = ResolutionRequest(query=query, budget=self.timeout)
        try:
            outcomes = await asyncio.gather(
                *(self._invoke(provider, request) for provider in self.providers)
            )
            merged = self._merge(outcomes)

            if self.ai_fallback.should_offer(query, merged):
                merged.append(self.ai_fallback.offer(query))

            results = rank_results(merged, self.limit)
        except Exception as e:
            logger.error(f"❌ Resolution failed for '{query}': {e}", exc_info=True)
            return []

        logger.debug(f"Resolved '{query}' into {len(results)} result(s)")
        return results

    # ────────────────────────── Internals ──────────────────────────

    async def _invoke(self, provider: ResultProvider, request: ResolutionRequest) -> ProviderOutcome:
        name = type(provider).__name__
        try:
            if not getattr(provider, "blocking", True):
                return provider.search(request.query, request.deadline)
            return await asyncio.wait_for(
                run_in_executor(provider.search, request.query, request.deadline),
                timeout=request.remaining(),
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"⚠️ {name} exceeded the {request.budget:.1f}s search budget")
            return ProviderOutcome.failed(name, e)
        except Exception as e:
            logger.warning(f"⚠️ {name} raised during search: {e}")
            return ProviderOutcome.failed(name, e)

    @staticmethod
    def _merge(outcomes: Sequence[ProviderOutcome]) -> List[QueryResult]:
        merged: List[QueryResult] = []
        for outcome in outcomes:
            if not outcome.ok:
                logger.debug(f"Discarding failed provider '{outcome.provider}': {outcome.error}")
                continue
            merged.extend(outcome.usable_results())
        return merged
