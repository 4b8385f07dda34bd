"""Fix strategy dispatch: rule id table first, then ordered message heuristics."""

from dataclasses import dataclass
from typing import Callable, Iterable

from scaffold_sentinel.domain.entities import Fix, ValidationIssue

FixHandler = Callable[[ValidationIssue], "Fix | None"]
IssuePredicate = Callable[[ValidationIssue], bool]


@dataclass(frozen=True)
class FixStrategy:
    """
    Turns one issue into one Fix.

    A handler returns None to decline and raises FixGenerationError to fail.
    """
    rule_id: str
    name: str
    description: str
    handler: FixHandler
    automatic: bool = True


@dataclass(frozen=True)
class FallbackRule:
    """Routes an issue with no strategy of its own to a registered strategy."""
    predicate: IssuePredicate
    rule_id: str


class FixStrategyRegistry:
    """Owned strategy map plus an explicit, ordered fallback list."""

    def __init__(
        self,
        strategies: Iterable[FixStrategy] = (),
        fallbacks: Iterable[FallbackRule] = (),
    ) -> None:
        self._strategies: dict[str, FixStrategy] = {}
        self._fallbacks: list[FallbackRule] = list(fallbacks)
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: FixStrategy) -> None:
        """Add or replace the strategy for `strategy.rule_id`."""
        self._strategies[strategy.rule_id] = strategy

    def unregister(self, rule_id: str) -> None:
        self._strategies.pop(rule_id, None)

    def add_fallback(self, fallback: FallbackRule) -> None:
        self._fallbacks.append(fallback)

    def get(self, rule_id: str) -> FixStrategy | None:
        return self._strategies.get(rule_id)

    def rule_ids(self) -> list[str]:
        return list(self._strategies)

    def resolve(self, issue: ValidationIssue) -> FixStrategy | None:
        """Strategy for the issue's rule, else the first fallback that matches."""
        strategy = self._strategies.get(issue.rule)
        if strategy is not None:
            return strategy
        for fallback in self._fallbacks:
            if fallback.predicate(issue):
                found = self._strategies.get(fallback.rule_id)
                if found is not None:
                    return found
        return None

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    @classmethod
    def default(cls) -> "FixStrategyRegistry":
        from scaffold_sentinel.domain.fixes.handlers import (
            default_fallbacks,
            default_strategies,
        )

        return cls(default_strategies(), default_fallbacks())
