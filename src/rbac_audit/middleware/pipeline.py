"""
Middleware pipeline runner.

Runs stages strictly in order, threading the context returned by each
stage into the next. The first non-PROCEED outcome halts the run.
"""

import logging
from typing import Awaitable, Callable

from rbac_audit.context import RequestContext
from rbac_audit.middleware.results import PipelineOutcome


logger = logging.getLogger("rbac_audit.middleware")

Stage = Callable[[RequestContext], Awaitable[PipelineOutcome]]


class Pipeline:
    """
    Ordered chain of middleware stages.

    Example usage:
    ```python
    pipeline = Pipeline(Authenticator(verifier), authorize("admin"))
    outcome = await pipeline.run(ctx)
    ```
    """

    def __init__(self, *stages: Stage):
        self.stages = tuple(stages)

    def then(self, stage: Stage) -> "Pipeline":
        """Return a new pipeline with ``stage`` appended."""
        return Pipeline(*self.stages, stage)

    async def run(self, ctx: RequestContext) -> PipelineOutcome:
        outcome = PipelineOutcome.proceed(ctx)

        for stage in self.stages:
            if ctx.is_disconnected is not None and await ctx.is_disconnected():
                logger.debug(
                    f"Client disconnected, stopping pipeline on {ctx.method} {ctx.path}"
                )
                return PipelineOutcome.aborted(ctx)

            outcome = await stage(ctx)
            if not outcome.is_success:
                return outcome
            ctx = outcome.context

        return outcome
