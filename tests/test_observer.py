"""
ProgressObserver tests: notification sequences, ordering and terminal outcome.
"""

import pytest

from taskstream.engine import ProgressObserver, ProgressTask
from taskstream.models import Completion, Outcome, ProgressUpdate


async def observe(executor, task):
    observer = ProgressObserver(task)
    handle = executor.submit(task)
    return [n async for n in observer.notifications(handle)]


@pytest.mark.asyncio
async def test_total_three_reports_two_steps_then_completion(executor):
    notes = await observe(executor, ProgressTask(total=3, step_seconds=0))

    assert notes[:-1] == [ProgressUpdate(1, 3), ProgressUpdate(2, 3)]
    assert isinstance(notes[-1], Completion)
    assert notes[-1].outcome.outcome == Outcome.SUCCEEDED


@pytest.mark.asyncio
@pytest.mark.parametrize("total", [0, 1])
async def test_trivial_totals_report_only_completion(executor, total):
    task = ProgressTask(total=total, step_seconds=0)

    notes = await observe(executor, task)

    assert len(notes) == 1
    assert isinstance(notes[0], Completion)
    assert task.current == total


@pytest.mark.asyncio
@pytest.mark.parametrize("total", [2, 5, 10])
async def test_progress_values_strictly_increase_below_total(executor, total):
    notes = await observe(executor, ProgressTask(total=total, step_seconds=0.001))

    values = [n.current for n in notes if isinstance(n, ProgressUpdate)]
    assert values == sorted(set(values))
    assert all(0 < v < total for v in values)
    assert sum(isinstance(n, Completion) for n in notes) == 1
    assert isinstance(notes[-1], Completion)


@pytest.mark.asyncio
async def test_fresh_runs_produce_identical_sequences(executor):
    runs = [await observe(executor, ProgressTask(total=10, step_seconds=0)) for _ in range(5)]

    progress = [[n for n in run if isinstance(n, ProgressUpdate)] for run in runs]
    assert all(p == progress[0] for p in progress)
    assert len(progress[0]) == 9
    assert all(run[-1].outcome.outcome == Outcome.SUCCEEDED for run in runs)


@pytest.mark.asyncio
async def test_failure_is_reported_in_completion(executor):
    class Broken(ProgressTask):
        def run(self):
            self._publish(1)
            raise ValueError("bad input")

    notes = await observe(executor, Broken(total=4, step_seconds=0))

    assert notes[0] == ProgressUpdate(1, 4)
    assert notes[-1].outcome.outcome == Outcome.FAILED
    assert notes[-1].outcome.reason == "ValueError: bad input"


@pytest.mark.asyncio
async def test_canceled_task_completes_with_canceled_outcome(executor):
    task = ProgressTask(total=10, step_seconds=30)
    observer = ProgressObserver(task)
    handle = executor.submit(task)

    notes = []
    async for note in observer.notifications(handle):
        notes.append(note)
        if isinstance(note, ProgressUpdate):
            task.cancel()

    assert notes[0] == ProgressUpdate(1, 10)
    assert notes[-1].outcome.outcome == Outcome.CANCELED
    assert task.current == 1


@pytest.mark.asyncio
async def test_observer_unsubscribes_when_done(executor):
    task = ProgressTask(total=3, step_seconds=0)

    await observe(executor, task)

    assert task._watchers == []


@pytest.mark.asyncio
async def test_handle_for_another_task_is_rejected(executor):
    observer = ProgressObserver(ProgressTask(total=1, step_seconds=0))
    other = executor.submit(ProgressTask(total=1, step_seconds=0))

    with pytest.raises(ValueError):
        async for _ in observer.notifications(other):
            pass
