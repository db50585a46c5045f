"""BenchmarkRunner — orchestrates one full benchmark run."""

import time
import uuid
from collections.abc import Iterable

from compass_bench.agent.domain.factory import AgentInvokerFactory
from compass_bench.config.domain.config import RunConfig
from compass_bench.config.infrastructure.validation import validate_run_config
from compass_bench.evaluation.application.aggregator import aggregate
from compass_bench.evaluation.application.scheduler import IterationScheduler
from compass_bench.evaluation.domain.context import RunContext
from compass_bench.evaluation.domain.result import RunnerResult
from compass_bench.evaluation.domain.task import expand_tasks
from compass_bench.fixture.domain.loader import FixtureLoader
from compass_bench.scoring.application.scorer import Scorer
from compass_bench.scoring.domain.strategy import ScoringStrategy
from compass_bench.scoring.infrastructure.strategies import BUILTIN_STRATEGIES


class BenchmarkRunner:
    """Validates the config, loads the fixture, then drives scheduler and aggregator.

    The runner receives its loader and invoker factory as ports so tests can
    substitute fakes without touching processes or the network.
    """

    def __init__(
        self,
        fixture_loader: FixtureLoader,
        invoker_factory: AgentInvokerFactory,
        strategies: Iterable[ScoringStrategy] = BUILTIN_STRATEGIES,
    ) -> None:
        self._fixture_loader = fixture_loader
        self._invoker_factory = invoker_factory
        self._strategies = tuple(strategies)

    async def run(self, config: RunConfig, context: RunContext) -> RunnerResult:
        """Execute the run and return its RunnerResult.

        Only the pre-dispatch steps raise. Once tasks are dispatched a
        RunnerResult is always returned, partial if the run was cancelled.

        Raises:
            ConfigValidationError: if the config is invalid or names an agent
                type no invoker exists for. Nothing is dispatched.
            FixtureLoadError: if the fixture cannot be found or parsed.
        """
        validate_run_config(config)
        fixture = self._fixture_loader.load(ref=config.fixture)
        agent = fixture.agent.with_model(config.agent.model)
        invoker = self._invoker_factory.create(spec=agent, parameters=config.agent)
        scorer = Scorer(config=config.scoring, strategies=self._strategies)

        tasks = expand_tasks(fixture=fixture, iterations=config.iterations)
        run_id = str(uuid.uuid4())
        observer = context.observer

        observer.run_started(
            run_id=run_id,
            total_prompts=len(fixture.prompts),
            iterations=config.iterations,
            concurrency=config.concurrency,
            total_tasks=len(tasks),
        )
        started_at = time.monotonic()

        scheduler = IterationScheduler(
            run_id=run_id,
            invoker=invoker,
            agent=agent,
            scorer=scorer,
            observer=observer,
            cancellation=context.cancellation,
            cancel_grace_seconds=config.cancel_grace_seconds,
        )
        results = await scheduler.run(
            tasks=tasks,
            concurrency=config.concurrency,
            timeout_seconds=config.timeout_seconds,
        )

        observer.run_completed(
            run_id=run_id,
            total_results=len(results),
            elapsed_seconds=time.monotonic() - started_at,
        )

        return RunnerResult(
            run_id=run_id,
            iteration_results=results,
            aggregated_results=aggregate(results),
            cancelled=any(result.cancelled for result in results),
        )
