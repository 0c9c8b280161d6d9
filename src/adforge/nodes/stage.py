"""Shared stage wrapper — cancellation check, logging, failure capture."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog
from langchain_core.runnables import RunnableConfig

from adforge.errors import AdForgeError, RunCancelledError
from adforge.graph.state import RunContext, RunState, get_run_context
from adforge.models.run import RunStage

logger = structlog.get_logger()

StageBody = Callable[[RunState, RunContext], Awaitable[dict]]


def pipeline_stage(name: str, completes: RunStage) -> Callable[[StageBody], Callable]:
    """Wrap a stage body into a graph node.

    The node refuses to start once the run's cancel event is set, records
    *completes* as the run stage on success, and turns any error into a
    ``failure`` entry (stage ``FAILED``) so the graph routes straight to END.
    """

    def decorator(body: StageBody):
        async def node(state: RunState, config: RunnableConfig) -> dict:
            ctx = get_run_context(config)
            run_id = state.get("run_id")
            logger.info(f"{name}.start", run_id=run_id)
            try:
                if ctx.cancel_event is not None and ctx.cancel_event.is_set():
                    raise RunCancelledError("Run cancelled by caller", stage=name)
                update = await body(state, ctx)
            except AdForgeError as exc:
                if exc.stage is None:
                    exc.stage = name
                logger.error(f"{name}.failed", run_id=run_id, error=exc.message, diagnostic=exc.diagnostic)
                return {"failure": exc, "stage": RunStage.FAILED.value}
            except Exception as exc:
                logger.exception(f"{name}.error", run_id=run_id)
                failure = AdForgeError(f"{name} failed: {exc}", stage=name)
                failure.__cause__ = exc
                return {"failure": failure, "stage": RunStage.FAILED.value}

            logger.info(f"{name}.done", run_id=run_id, stage=completes.value)
            return {**update, "stage": completes.value}

        # no functools.wraps: the graph inspects this signature for `config`
        node.__name__ = body.__name__
        node.__qualname__ = body.__qualname__
        node.__doc__ = body.__doc__
        return node

    return decorator
