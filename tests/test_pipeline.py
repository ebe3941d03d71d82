import pytest

from archzfs_installer.pipeline import Outcome, Stage, Step, run_stage

from conftest import RecordingRunner


def _stage(n: int) -> Stage:
    return Stage(name="Demo", steps=tuple(Step(label=f"s{i}", command=f"cmd {i}") for i in range(1, n + 1)))


def test_all_steps_run_once_in_order():
    runner = RecordingRunner()
    outcome = run_stage(_stage(4), runner=runner)

    assert outcome.ok
    assert runner.labels == ["s1", "s2", "s3", "s4"]
    assert outcome.output == "ok: s4\n"


@pytest.mark.parametrize("k", [1, 2, 5])
def test_failure_at_step_k_stops_the_stage(k):
    runner = RecordingRunner(fail_when=lambda s: s.label == f"s{k}", exit_status=9)
    outcome = run_stage(_stage(5), runner=runner)

    assert not outcome.ok
    assert outcome.exit_status == 9
    assert outcome.step.label == f"s{k}"
    assert runner.labels == [f"s{i}" for i in range(1, k + 1)]


def test_empty_stage_succeeds():
    outcome = run_stage(Stage(name="Empty", steps=()), runner=RecordingRunner())
    assert outcome.ok
    assert outcome.output == ""


def test_step_and_outcome_are_immutable():
    step = Step(label="a", command="true")
    with pytest.raises(AttributeError):
        step.command = "false"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        Outcome.success().ok = False  # type: ignore[misc]
