# Copyright (c) Syntropy Systems
"""Tests for running experiment trials."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from scientist import BehaviorNotFoundError, Experiment, Operation, ResultError, run

if TYPE_CHECKING:
    from scientist import Result


def fail(message: str):
    """Build a hook that raises RuntimeError(message)."""

    def hook(*args: object) -> bool:
        raise RuntimeError(message)

    return hook


def assert_invariants(result: Result) -> None:
    assert len(result.observations) == len(result.candidates) + 1
    assert result.observations[0] is result.control
    ignored = {id(o) for o in result.ignored}
    mismatched = {id(o) for o in result.mismatched}
    candidates = {id(o) for o in result.candidates}
    assert not ignored & mismatched
    assert ignored <= candidates
    assert mismatched <= candidates


class TestRunScenarios:
    """End-to-end trial scenarios."""

    def test_matching_candidate(self, experiment: Experiment) -> None:
        """Test that an equal candidate is neither ignored nor mismatched."""
        experiment.candidate(lambda: 5, name="new")

        result = run(experiment, "control")

        assert_invariants(result)
        assert len(result.candidates) == 1
        assert result.candidates[0].name == "new"
        assert result.mismatched == []
        assert result.ignored == []
        assert result.matched == result.candidates
        assert result.errors == []

    def test_mismatching_candidate(self, experiment: Experiment) -> None:
        """Test that a different value is reported as a mismatch."""
        experiment.candidate(lambda: 6)

        result = run(experiment, "control")

        assert_invariants(result)
        assert [o.name for o in result.mismatched] == ["candidate"]
        assert result.ignored == []
        assert result.has_mismatches

    def test_faulting_candidate(self, experiment: Experiment) -> None:
        """Test that a crashing candidate is a mismatch, not a crash."""
        experiment.candidate(lambda: 1 // 0)

        result = run(experiment, "control")

        assert_invariants(result)
        candidate = result.candidates[0]
        assert isinstance(candidate.error, ZeroDivisionError)
        assert candidate.value is None
        assert result.mismatched == [candidate]
        assert result.control.value == 5

    def test_missing_control(self) -> None:
        """Test that an unregistered control name still completes."""
        exp = Experiment("no-control")
        exp.candidate(lambda: 1)

        result = run(exp, "control")

        assert_invariants(result)
        assert isinstance(result.control.error, BehaviorNotFoundError)
        assert "not found" in str(result.control.error)
        assert result.control.value is None
        assert len(result.candidates) == 1

    def test_no_candidates(self, experiment: Experiment) -> None:
        """Test a trial with only the control registered."""
        result = run(experiment)

        assert_invariants(result)
        assert result.observations == [result.control]
        assert result.candidates == []

    def test_registration_order(self, experiment: Experiment) -> None:
        """Test that candidates follow registration order."""
        for name in ["c", "a", "b"]:
            experiment.candidate(lambda: 5, name=name)

        result = run(experiment)

        assert [o.name for o in result.observations] == ["control", "c", "a", "b"]

    def test_non_default_control_name(self) -> None:
        """Test that any registered behavior can act as the control."""
        exp = Experiment("named")
        exp.behavior("legacy", lambda: "old")
        exp.behavior("rewrite", lambda: "old")

        result = run(exp, "rewrite")

        assert result.control.name == "rewrite"
        assert [o.name for o in result.candidates] == ["legacy"]
        assert result.mismatched == []

    def test_control_error_kept_on_result(self) -> None:
        """Test that the control's error is returned exactly as observed."""
        error = LookupError("missing row")

        def control() -> object:
            raise error

        exp = Experiment("failing-control")
        exp.use(control)
        exp.candidate(lambda: None)

        result = run(exp)

        assert result.control.error is error
        # Both values are None, so the default comparator sees a match
        assert result.mismatched == []


class TestComparator:
    """Tests for comparator handling."""

    def test_custom_comparator(self, experiment: Experiment) -> None:
        """Test that a custom comparator decides matches."""
        experiment.candidate(lambda: 5.0001)
        experiment.compare(lambda a, b: abs(a - b) < 0.01)

        result = run(experiment)

        assert result.mismatched == []

    def test_comparator_error_is_mismatch(self, experiment: Experiment) -> None:
        """Test that a failing comparator classifies the pair as mismatched."""
        experiment.candidate(lambda: 5)
        experiment.compare(fail("comparator broke"))

        result = run(experiment)

        assert_invariants(result)
        assert [o.name for o in result.mismatched] == ["candidate"]
        assert len(result.errors) == 1
        assert result.errors[0].operation is Operation.COMPARE
        assert result.errors[0].experiment == "widget-permissions"
        assert str(result.errors[0]) == "comparator broke"

    def test_comparator_error_can_still_be_ignored(self, experiment: Experiment) -> None:
        """Test that ignore rules still run after a comparator failure."""
        experiment.candidate(lambda: 5)
        experiment.compare(fail("comparator broke"))
        experiment.ignore(lambda a, b: True)

        result = run(experiment)

        assert [o.name for o in result.ignored] == ["candidate"]
        assert result.mismatched == []
        assert [e.operation for e in result.errors] == [Operation.COMPARE]

    def test_non_bool_comparator_result(self, experiment: Experiment) -> None:
        """Test that a comparator returning a non-bool is an error."""
        experiment.candidate(lambda: 5)
        experiment.compare(lambda a, b: "yes")

        result = run(experiment)

        assert len(result.mismatched) == 1
        assert "bad result type" in str(result.errors[0])


class TestIgnoreRules:
    """Tests for ignore rule evaluation."""

    def test_ignore_rule_suppresses_mismatch(self, experiment: Experiment) -> None:
        """Test that a matching ignore rule moves the candidate to ignored."""
        experiment.candidate(lambda: 6)
        experiment.ignore(lambda control, candidate: candidate == 6)

        result = run(experiment)

        assert_invariants(result)
        assert [o.name for o in result.ignored] == ["candidate"]
        assert result.mismatched == []

    def test_first_ignoring_rule_short_circuits(self, experiment: Experiment) -> None:
        """Test that rules after the first True are not evaluated."""
        calls: list[str] = []

        def rule(name: str, answer: bool):
            def ignore(control: object, candidate: object) -> bool:
                calls.append(name)
                return answer

            return ignore

        experiment.candidate(lambda: 6)
        experiment.ignore(rule("first", False))
        experiment.ignore(rule("second", True))
        experiment.ignore(rule("third", True))

        result = run(experiment)

        assert calls == ["first", "second"]
        assert len(result.ignored) == 1

    def test_ignore_rules_skipped_for_matches(self, experiment: Experiment) -> None:
        """Test that ignore rules only run for mismatches."""
        calls: list[object] = []
        experiment.candidate(lambda: 5)
        experiment.ignore(lambda a, b: calls.append(b) or True)

        result = run(experiment)

        assert calls == []
        assert result.ignored == []

    def test_ignore_error_is_not_ignored(self, experiment: Experiment) -> None:
        """Test that a failing rule leaves the candidate mismatched."""
        experiment.candidate(lambda: 6)
        experiment.ignore(fail("rule broke"))
        experiment.ignore(lambda a, b: True)

        result = run(experiment)

        assert_invariants(result)
        assert [o.name for o in result.mismatched] == ["candidate"]
        assert result.ignored == []
        assert [e.operation for e in result.errors] == [Operation.IGNORE]


class TestHooks:
    """Tests for before-run, publish and error-report hooks."""

    def test_before_run_called_once(self, experiment: Experiment) -> None:
        """Test that the before-run hook runs before the control."""
        events: list[str] = []
        experiment.before_run_hook(lambda: events.append("before"))
        experiment.behaviors["control"] = lambda: events.append("control") or 5

        _ = run(experiment)

        assert events == ["before", "control"]

    def test_before_run_error_does_not_stop_trial(self, experiment: Experiment) -> None:
        """Test that a failing before-run hook is recorded and skipped."""
        experiment.before_run_hook(fail("setup broke"))
        experiment.candidate(lambda: 5)

        result = run(experiment)

        assert result.control.value == 5
        assert len(result.candidates) == 1
        assert [e.operation for e in result.errors] == [Operation.BEFORE_RUN]

    def test_publisher_receives_result(self, experiment: Experiment) -> None:
        """Test that the publisher is handed the assembled result."""
        published: list[Result] = []
        experiment.candidate(lambda: 6)
        experiment.publish(published.append)

        result = run(experiment)

        assert published == [result]
        assert len(published[0].mismatched) == 1

    def test_publish_error_recorded(self, experiment: Experiment) -> None:
        """Test that a failing publisher is captured as a ResultError."""
        experiment.publish(fail("sink down"))

        result = run(experiment)

        assert [e.operation for e in result.errors] == [Operation.PUBLISH]

    def test_error_reporter_gets_all_errors(self, experiment: Experiment) -> None:
        """Test that errors are reported once, as a batch."""
        batches: list[tuple[ResultError, ...]] = []
        experiment.candidate(lambda: 6)
        experiment.before_run_hook(fail("setup"))
        experiment.compare(fail("compare"))
        experiment.ignore(fail("ignore"))
        experiment.publish(fail("publish"))
        experiment.report_errors(lambda *errors: batches.append(errors))

        result = run(experiment)

        assert len(batches) == 1
        assert list(batches[0]) == result.errors
        assert [e.operation.value for e in batches[0]] == [
            "before_run",
            "compare",
            "ignore",
            "publish",
        ]

    def test_error_reporter_not_called_without_errors(self, experiment: Experiment) -> None:
        """Test that a clean trial does not call the error reporter."""
        batches: list[object] = []
        experiment.candidate(lambda: 6)
        experiment.report_errors(lambda *errors: batches.append(errors))

        _ = run(experiment)

        assert batches == []

    def test_error_reporter_failure_is_contained(self, experiment: Experiment) -> None:
        """Test that a broken error reporter does not fail the trial."""
        experiment.publish(fail("publish"))
        experiment.report_errors(fail("reporter"))

        result = run(experiment)

        assert result.control.value == 5
        assert len(result.errors) == 1

    def test_default_error_reporter_logs(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that the default reporter logs each error."""
        exp = Experiment("logged")
        exp.use(lambda: 1)
        exp.publish(fail("sink down"))

        with caplog.at_level("WARNING", logger="scientist.hooks"):
            _ = run(exp)

        assert "publish" in caplog.text
        assert "sink down" in caplog.text
