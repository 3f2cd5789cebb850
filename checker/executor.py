"""Run a single rule against a single project inside a fault boundary."""

from __future__ import annotations

import logging

from .project import ProjectContext
from .result import Outcome, ResultKind
from .rules import RuleDescriptor

logger = logging.getLogger(__name__)

RULE_RESULT_KINDS = (ResultKind.PASS, ResultKind.FAIL, ResultKind.SKIP)


def _engine_error(descriptor: RuleDescriptor, cause: str) -> Outcome:
    return Outcome(
        rule_id=descriptor.rule_id,
        kind=ResultKind.ENGINE_ERROR,
        severity=descriptor.severity,
        brief=descriptor.brief,
        diagnostic=f"rule {descriptor.rule_id} failed: {cause}",
    )


def _describe(exc: BaseException) -> str:
    message = str(exc)
    if message:
        return f"{type(exc).__name__}: {message}"
    return type(exc).__name__


def execute(descriptor: RuleDescriptor, context: ProjectContext) -> Outcome:
    """Evaluate ``descriptor`` against ``context`` and return exactly one outcome.

    Exceptions raised by the rule, ``SystemExit`` included, and return values
    that break the rule contract, are turned into ``ENGINE_ERROR`` outcomes instead of propagating.
    The rule is called once; there are no retries.
    """

    try:
        returned = descriptor.check(context)
    except (Exception, SystemExit) as exc:  # pylint: disable=broad-except
        logger.warning("Rule %s raised on %s: %s", descriptor.rule_id, context.identifier, exc)
        logger.debug("Traceback for rule %s", descriptor.rule_id, exc_info=True)
        return _engine_error(descriptor, _describe(exc))

    try:
        kind, diagnostic = returned
    except (TypeError, ValueError):
        return _engine_error(descriptor, f"returned {returned!r} instead of a (result, diagnostic) pair")

    if kind not in RULE_RESULT_KINDS:
        return _engine_error(descriptor, f"returned unsupported result {kind!r}")
    kind = ResultKind(kind)
    if not isinstance(diagnostic, str):
        return _engine_error(descriptor, f"returned non-text diagnostic {diagnostic!r}")
    if kind is not ResultKind.PASS and not diagnostic.strip():
        return _engine_error(descriptor, f"returned {kind.value} without a diagnostic")

    return Outcome(
        rule_id=descriptor.rule_id,
        kind=kind,
        severity=descriptor.severity,
        brief=descriptor.brief,
        diagnostic=diagnostic,
    )
