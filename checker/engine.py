"""Drive rule execution across discovered projects."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from .aggregator import ResultAggregator
from .executor import execute
from .project import ProjectContext
from .registry import RuleRegistry
from .result import OverallReport
from .rules import RuleDescriptor
from .severity import Severity

logger = logging.getLogger(__name__)

CANCELLED_REASON = "cancelled before all rules were evaluated"

Pair = Tuple[ProjectContext, RuleDescriptor]


def _plan(projects: Iterable[ProjectContext], registry: RuleRegistry, aggregator: ResultAggregator) -> List[Pair]:
    pairs: List[Pair] = []
    for project in projects:
        aggregator.begin_project(project)
        rules = registry.applicable_rules(project.project_type)
        logger.debug("%d rules apply to %s (%s)", len(rules), project.identifier, project.project_type.value)
        pairs.extend((project, descriptor) for descriptor in rules)
    return pairs


def run_checks(
    projects: Iterable[ProjectContext],
    registry: RuleRegistry,
    *,
    blocking_threshold: Severity = Severity.ERROR,
    workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> OverallReport:
    """Run every applicable rule on every project and return the frozen report.

    With ``workers`` above one, (project, rule) pairs are dispatched to a
    bounded thread pool. Setting ``cancel_event`` stops dispatching new pairs;
    evaluations already running finish and the report is marked incomplete.
    """

    aggregator = ResultAggregator(blocking_threshold)
    cancel_event = cancel_event or threading.Event()
    pairs = _plan(projects, registry, aggregator)

    def run_pair(pair: Pair) -> bool:
        if cancel_event.is_set():
            return False
        project, descriptor = pair
        aggregator.record(project.identifier, execute(descriptor, project))
        return True

    if workers <= 1:
        dispatched = 0
        for pair in pairs:
            if not run_pair(pair):
                break
            dispatched += 1
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            dispatched = sum(1 for ran in pool.map(run_pair, pairs) if ran)

    if dispatched < len(pairs):
        logger.warning("Stopped after %d of %d rule evaluations", dispatched, len(pairs))
        aggregator.mark_incomplete(CANCELLED_REASON)
    return aggregator.finalize()
