"""Aggregator — groups IterationResults by prompt and computes mean points."""

import statistics

from compass_bench.evaluation.domain.result import AggregatedResult, IterationResult


def aggregate(results: list[IterationResult]) -> list[AggregatedResult]:
    """Return one AggregatedResult per prompt, in order of first appearance.

    Cancelled entries are not folded: a prompt whose results were all
    cancelled is omitted instead of being reported with an average over
    zero executions.
    """
    # Preserve insertion order via dict keyed by prompt id.
    groups: dict[str, list[float]] = {}
    for result in results:
        if result.cancelled:
            continue
        groups.setdefault(result.prompt_id, []).append(result.points)

    return [
        AggregatedResult(
            prompt_id=prompt_id,
            iterations=len(points),
            average_points=statistics.fmean(points),
        )
        for prompt_id, points in groups.items()
    ]
