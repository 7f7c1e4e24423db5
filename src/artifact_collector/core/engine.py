"""Classification orchestration engine."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from artifact_collector.core.inspector import ArchiveInspector
from artifact_collector.core.registry import RuleRegistry
from artifact_collector.models.candidate import Candidate
from artifact_collector.models.classification import Classification, ClassificationSet, ClassifiedArtifact
from artifact_collector.rules.context import HeuristicOptions, RuleContext
from artifact_collector.rules.symbols import find_symbol_file

log = logging.getLogger(__name__)

ResultCallback = Callable[[ClassifiedArtifact], None]

# Rule id reported when no rule in the decision list fired.
DEFAULT_RULE_ID = "default"


class ClassificationEngine:
    """Runs every candidate through the registry's decision lists."""

    def __init__(
        self,
        registry: RuleRegistry,
        inspector: ArchiveInspector,
        options: HeuristicOptions | None = None,
    ) -> None:
        self.registry = registry
        self.inspector = inspector
        self.options = options or HeuristicOptions()

    def classify(self, candidate: Candidate) -> ClassifiedArtifact:
        """Classify one candidate. First matching rule wins."""
        ctx = RuleContext(candidate, self.inspector, self.options)
        classification = Classification.COMPILED_APPLICATION
        rule_id = DEFAULT_RULE_ID
        for rule in self.registry.rules_for(candidate.kind):
            if rule.matches(ctx):
                classification = rule.classification
                rule_id = rule.id
                break

        log.debug("%s -> %s (%s)", candidate.relative_path, classification.value, rule_id)

        if candidate.is_assembly and classification is not Classification.TEST_ARTIFACT:
            symbol = find_symbol_file(candidate)
            return ClassifiedArtifact(
                candidate=candidate,
                classification=classification,
                rule_id=rule_id,
                symbol=symbol,
                symbol_missing=symbol is None,
            )
        return ClassifiedArtifact(candidate=candidate, classification=classification, rule_id=rule_id)

    def classify_all(
        self,
        candidates: list[Candidate],
        jobs: int = 1,
        on_result: ResultCallback | None = None,
    ) -> ClassificationSet:
        """Classify every candidate and reduce the results into buckets.

        With ``jobs > 1`` candidates are classified in a thread pool.  Each
        candidate still gets its own scratch directory, and results are
        merged by discovery index, so the outcome matches a sequential run.
        """
        if jobs > 1 and len(candidates) > 1:
            results = self._classify_parallel(candidates, jobs, on_result)
        else:
            results = self._classify_sequential(candidates, on_result)

        classified = ClassificationSet.from_results(results)
        counts = classified.counts()
        log.info(
            "Classified %d candidates: %d compiled, %d 3rd party, %d test, %d invalid",
            len(candidates),
            counts[Classification.COMPILED_APPLICATION],
            counts[Classification.THIRD_PARTY_LIBRARY],
            counts[Classification.TEST_ARTIFACT],
            counts[Classification.INVALID_ARCHIVE],
        )
        return classified

    def _classify_sequential(
        self,
        candidates: list[Candidate],
        on_result: ResultCallback | None,
    ) -> list[ClassifiedArtifact]:
        results: list[ClassifiedArtifact] = []
        for candidate in candidates:
            result = self.classify(candidate)
            results.append(result)
            if on_result:
                on_result(result)
        return results

    def _classify_parallel(
        self,
        candidates: list[Candidate],
        jobs: int,
        on_result: ResultCallback | None,
    ) -> list[ClassifiedArtifact]:
        max_workers = min(jobs, len(candidates))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(self.classify, candidate) for candidate in candidates]
            results = [future.result() for future in futures]
        # Callbacks run on the calling thread, in discovery order.
        if on_result:
            for result in results:
                on_result(result)
        return results
