"""
Provider outcome: what one result provider produced for one query.

Keeps "matched nothing" apart from "opted out" and "failed" so the resolver
discards failures explicitly instead of by accident.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from lumina.models import QueryResult


class OutcomeStatus(Enum):
    MATCHED = "matched"                # success, possibly with zero results
    NOT_APPLICABLE = "not_applicable"  # the provider does not handle this query
    FAILED = "failed"                  # the provider tried and failed


@dataclass(frozen=True)
class ProviderOutcome:
    provider: str
    status: OutcomeStatus
    results: List[QueryResult] = field(default_factory=list)
    error: Optional[BaseException] = None

    @classmethod
    def matched(cls, provider: str, results: List[QueryResult]) -> "ProviderOutcome":
        return cls(provider, OutcomeStatus.MATCHED, list(results))

    @classmethod
    def not_applicable(cls, provider: str) -> "ProviderOutcome":
        return cls(provider, OutcomeStatus.NOT_APPLICABLE)

    @classmethod
    def failed(cls, provider: str, error: BaseException) -> "ProviderOutcome":
        return cls(provider, OutcomeStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED

    def usable_results(self) -> List[QueryResult]:
        """Results that may enter the merged list; failures contribute none."""
        if self.status is OutcomeStatus.MATCHED:
            return list(self.results)
        return []
