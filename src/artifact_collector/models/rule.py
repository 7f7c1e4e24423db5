"""Classification rule model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from artifact_collector.models.classification import Classification

if TYPE_CHECKING:
    from artifact_collector.rules.context import RuleContext


@dataclass(frozen=True)
class RuleGroup:
    """Display grouping for the rules of one ecosystem."""

    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class Rule:
    """One heuristic in a first-match-wins decision list.

    ``predicate`` receives the per-candidate :class:`RuleContext` and returns
    True when the rule fires; the candidate then gets ``classification``.
    ``kinds`` restricts the rule to those candidate kinds.
    """

    id: str
    name: str
    description: str
    classification: Classification
    predicate: Callable[[RuleContext], bool]
    kinds: tuple[str, ...]
    group: RuleGroup

    def applies_to(self, kind: str) -> bool:
        return kind in self.kinds

    def matches(self, ctx: RuleContext) -> bool:
        return self.applies_to(ctx.candidate.kind) and self.predicate(ctx)
