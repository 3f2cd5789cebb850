import threading

import pytest

from checker.aggregator import ResultAggregator
from checker.errors import DuplicateOutcomeError, ReportAlreadyFinalizedError
from checker.project import ProjectContext, ProjectType
from checker.result import Outcome, ResultKind, Verdict
from checker.severity import Severity


def outcome(rule_id, kind=ResultKind.PASS, severity=Severity.ERROR, diagnostic=""):
    if kind is not ResultKind.PASS and not diagnostic:
        diagnostic = f"{rule_id} {kind.value}"
    return Outcome(rule_id=rule_id, kind=kind, severity=severity, diagnostic=diagnostic)


def test_outcome_requires_diagnostics():
    with pytest.raises(ValueError):
        Outcome(rule_id="R1", kind=ResultKind.FAIL, severity=Severity.ERROR)
    with pytest.raises(ValueError):
        Outcome(rule_id="R1", kind=ResultKind.SKIP, severity=Severity.ERROR)
    with pytest.raises(ValueError):
        Outcome(rule_id="R1", kind=ResultKind.ENGINE_ERROR, severity=Severity.ERROR)


def test_finalize_sorts_projects_and_rules():
    aggregator = ResultAggregator()
    aggregator.record("b", outcome("R2"))
    aggregator.record("a", outcome("R3"))
    aggregator.record("b", outcome("R1"))
    aggregator.record("a", outcome("R1"))

    report = aggregator.finalize()

    assert [project.project for project in report.projects] == ["a", "b"]
    assert [item.rule_id for item in report.project("a").outcomes] == ["R1", "R3"]
    assert [item.rule_id for item in report.project("b").outcomes] == ["R1", "R2"]
    assert report.verdict is Verdict.PASS
    assert report.summary.passed == 4


def test_verdict_uses_blocking_threshold():
    aggregator = ResultAggregator()
    aggregator.record("warned", outcome("R1", ResultKind.FAIL, Severity.WARNING))
    aggregator.record("skipped", outcome("R1", ResultKind.SKIP))
    aggregator.record("broken", outcome("R1", ResultKind.ENGINE_ERROR))
    aggregator.record("failed", outcome("R1", ResultKind.FAIL))

    report = aggregator.finalize()

    assert report.project("warned").verdict is Verdict.PASS
    assert report.project("skipped").verdict is Verdict.PASS
    assert report.project("broken").verdict is Verdict.FAIL
    assert report.project("failed").verdict is Verdict.FAIL
    assert report.verdict is Verdict.FAIL
    assert report.exit_code() == 1


def test_lower_threshold_makes_warnings_block():
    aggregator = ResultAggregator(blocking_threshold=Severity.WARNING)
    aggregator.record("warned", outcome("R1", ResultKind.FAIL, Severity.WARNING))
    aggregator.record("noticed", outcome("R1", ResultKind.FAIL, Severity.NOTICE))

    report = aggregator.finalize()

    assert report.project("warned").verdict is Verdict.FAIL
    assert report.project("noticed").verdict is Verdict.PASS
    assert report.blocking_threshold is Severity.WARNING


def test_summary_counts_every_kind():
    aggregator = ResultAggregator()
    aggregator.record("p", outcome("R1"))
    aggregator.record("p", outcome("R2", ResultKind.FAIL))
    aggregator.record("p", outcome("R3", ResultKind.SKIP))
    aggregator.record("q", outcome("R1", ResultKind.ENGINE_ERROR))

    summary = aggregator.finalize().summary

    assert summary.to_dict() == {"pass": 1, "fail": 1, "skip": 1, "engine_error": 1}
    assert summary.total == 4


def test_record_after_finalize_fails():
    aggregator = ResultAggregator()
    aggregator.finalize()

    with pytest.raises(ReportAlreadyFinalizedError):
        aggregator.record("a", outcome("R1"))
    with pytest.raises(ReportAlreadyFinalizedError):
        aggregator.finalize()


def test_duplicate_outcome_is_rejected():
    aggregator = ResultAggregator()
    aggregator.record("a", outcome("R1"))

    with pytest.raises(DuplicateOutcomeError):
        aggregator.record("a", outcome("R1", ResultKind.FAIL))


def test_projects_without_rules_are_reported(tmp_path):
    aggregator = ResultAggregator()
    aggregator.begin_project(ProjectContext(path=tmp_path, project_type=ProjectType.LIBRARY))

    report = aggregator.finalize()

    assert report.projects[0].project == str(tmp_path)
    assert report.projects[0].project_type == "library"
    assert report.projects[0].outcomes == ()
    assert report.projects[0].verdict is Verdict.PASS


def test_incomplete_report_keeps_verdict_but_exits_nonzero():
    aggregator = ResultAggregator()
    aggregator.record("a", outcome("R1"))
    aggregator.mark_incomplete("cancelled")

    report = aggregator.finalize()

    assert not report.complete
    assert report.verdict is Verdict.PASS
    assert report.exit_code() == 1


def test_concurrent_record_keeps_every_outcome():
    aggregator = ResultAggregator()

    def worker(project_id):
        for index in range(200):
            aggregator.record(project_id, outcome(f"R{index:03d}"))

    threads = [threading.Thread(target=worker, args=(f"p{n}",)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    report = aggregator.finalize()

    assert len(report.projects) == 8
    assert all(len(project.outcomes) == 200 for project in report.projects)
    assert report.summary.passed == 1600
