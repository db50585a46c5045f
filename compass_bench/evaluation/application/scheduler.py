"""IterationScheduler — runs iteration tasks on a bounded worker pool."""

import asyncio
import time

from compass_bench.agent.domain.execution import ExecutionStatus, RawExecution
from compass_bench.agent.domain.invoker import AgentInvoker
from compass_bench.evaluation.domain.cancellation import CancellationToken
from compass_bench.evaluation.domain.observer import RunObserver
from compass_bench.evaluation.domain.result import IterationResult
from compass_bench.evaluation.domain.task import IterationTask
from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.scoring.application.scorer import Scorer

# Extra time an invoker gets past the per-iteration timeout before the
# scheduler gives up on it and records a TIMEOUT itself.
DEFAULT_DEADLINE_MARGIN_SECONDS = 5.0


class IterationScheduler:
    """Dispatches IterationTasks to `concurrency` workers sharing one queue.

    Every dispatched task yields exactly one IterationResult. Exceptions raised
    while invoking or scoring are caught at the task boundary and recorded as
    FAIL, so one misbehaving iteration never aborts the run. When the
    cancellation token fires, workers stop taking new tasks, in-flight tasks
    get `cancel_grace_seconds` to finish, and everything left is recorded as a
    cancelled FAIL. A worker that dies outside a task re-raises from run().
    """

    def __init__(
        self,
        run_id: str,
        invoker: AgentInvoker,
        agent: AgentSpec,
        scorer: Scorer,
        observer: RunObserver,
        cancellation: CancellationToken,
        cancel_grace_seconds: float,
        deadline_margin_seconds: float = DEFAULT_DEADLINE_MARGIN_SECONDS,
    ) -> None:
        self._run_id = run_id
        self._invoker = invoker
        self._agent = agent
        self._scorer = scorer
        self._observer = observer
        self._cancellation = cancellation
        self._cancel_grace_seconds = cancel_grace_seconds
        self._deadline_margin_seconds = deadline_margin_seconds

    async def run(
        self, tasks: list[IterationTask], concurrency: int, timeout_seconds: float
    ) -> list[IterationResult]:
        """Run every task and return results ordered by (prompt position, iteration)."""
        queue: asyncio.Queue[IterationTask] = asyncio.Queue()
        for task in tasks:
            queue.put_nowait(task)

        collected: list[tuple[IterationTask, IterationResult]] = []
        in_flight: dict[int, IterationTask] = {}
        lock = asyncio.Lock()

        workers = [
            asyncio.create_task(
                self._worker(
                    worker_id=worker_id,
                    queue=queue,
                    in_flight=in_flight,
                    collected=collected,
                    lock=lock,
                    total=len(tasks),
                    timeout_seconds=timeout_seconds,
                ),
                name=f"compass-worker-{worker_id}",
            )
            for worker_id in range(min(concurrency, len(tasks)))
        ]
        cancel_waiter = asyncio.create_task(self._cancellation.wait())

        try:
            pending = set(workers)
            while pending and not self._cancellation.cancelled:
                done, _ = await asyncio.wait(
                    pending | {cancel_waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                pending -= done
                _raise_worker_failure(done - {cancel_waiter})

            if self._cancellation.cancelled and (pending or not queue.empty()):
                self._observer.run_cancelled(
                    run_id=self._run_id, pending=queue.qsize() + len(in_flight)
                )
            if pending:
                done, pending = await asyncio.wait(
                    pending, timeout=self._cancel_grace_seconds
                )
                await _cancel_all(pending)
                _raise_worker_failure(done)
        finally:
            cancel_waiter.cancel()
            await _cancel_all(workers)

        # Force-cancelled in-flight tasks first, then everything never dispatched.
        for task in in_flight.values():
            collected.append(
                (task, self._cancelled(task=task, reason="cancelled while running"))
            )
        while not queue.empty():
            task = queue.get_nowait()
            collected.append(
                (task, self._cancelled(task=task, reason="run cancelled before dispatch"))
            )

        collected.sort(key=lambda pair: pair[0].sort_key)
        return [result for _, result in collected]

    async def _worker(
        self,
        worker_id: int,
        queue: asyncio.Queue[IterationTask],
        in_flight: dict[int, IterationTask],
        collected: list[tuple[IterationTask, IterationResult]],
        lock: asyncio.Lock,
        total: int,
        timeout_seconds: float,
    ) -> None:
        while not self._cancellation.cancelled:
            try:
                task = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            in_flight[worker_id] = task
            result = await self._execute(task=task, timeout_seconds=timeout_seconds)

            async with lock:
                del in_flight[worker_id]
                collected.append((task, result))
                self._observer.run_progress(
                    run_id=self._run_id, completed=len(collected), total=total
                )

    async def _execute(
        self, task: IterationTask, timeout_seconds: float
    ) -> IterationResult:
        """Run one task, turning any Exception it raises into a FAIL result."""
        try:
            return await self._attempt(task=task, timeout_seconds=timeout_seconds)
        except Exception as exc:
            return self._failed(task=task, reason=f"{type(exc).__name__}: {exc}")

    async def _attempt(
        self, task: IterationTask, timeout_seconds: float
    ) -> IterationResult:
        self._observer.task_started(
            run_id=self._run_id, prompt_id=task.prompt_id, iteration=task.iteration
        )
        started = time.monotonic()

        try:
            async with asyncio.timeout(timeout_seconds + self._deadline_margin_seconds):
                execution = await self._invoker.invoke(
                    prompt=task.prompt, agent=self._agent, timeout_seconds=timeout_seconds
                )
        except TimeoutError:
            execution = RawExecution(
                status=ExecutionStatus.TIMEOUT,
                duration_ms=int((time.monotonic() - started) * 1000),
                error=f"agent did not return within {timeout_seconds}s",
            )
        except Exception as exc:
            return self._failed(task=task, reason=f"{type(exc).__name__}: {exc}")

        # Only a signalled run turns an agent-side cancel into a cancelled marker.
        if (
            execution.status is ExecutionStatus.CANCELLED
            and self._cancellation.cancelled
        ):
            return self._cancelled(task=task, reason=execution.error or "agent call cancelled")

        try:
            score = self._scorer.classify(criteria=task.prompt.criteria, execution=execution)
        except Exception as exc:
            return self._failed(task=task, reason=str(exc))

        error = None
        if not execution.succeeded:
            error = execution.error or f"agent finished with status {execution.status}"

        self._observer.task_completed(
            run_id=self._run_id,
            prompt_id=task.prompt_id,
            iteration=task.iteration,
            classification=score.classification.value,
            points=score.points,
        )
        return IterationResult.scored(
            prompt_id=task.prompt_id, iteration=task.iteration, score=score, error=error
        )

    def _failed(self, task: IterationTask, reason: str) -> IterationResult:
        self._observer.task_failed(
            run_id=self._run_id,
            prompt_id=task.prompt_id,
            iteration=task.iteration,
            reason=reason,
        )
        return IterationResult.failed(
            prompt_id=task.prompt_id, iteration=task.iteration, reason=reason
        )

    def _cancelled(self, task: IterationTask, reason: str) -> IterationResult:
        self._observer.task_cancelled(
            run_id=self._run_id, prompt_id=task.prompt_id, iteration=task.iteration
        )
        return IterationResult.cancelled_marker(
            prompt_id=task.prompt_id, iteration=task.iteration, reason=reason
        )


async def _cancel_all(tasks: set[asyncio.Task[None]] | list[asyncio.Task[None]]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def _raise_worker_failure(workers: set[asyncio.Task[None]]) -> None:
    for worker in workers:
        if worker.cancelled():
            continue
        exc = worker.exception()
        if exc is not None:
            raise exc
