"""Windowed parallel execution for batch resource upserts."""

from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any

import structlog

from foxnose_sdk.management.models import BatchItemError, BatchUpsertItem, BatchUpsertResult


logger = structlog.get_logger()

DEFAULT_MAX_CONCURRENCY = 5

UpsertFn = Callable[[BatchUpsertItem], Any]
ProgressFn = Callable[[int, int], None]


def batch_upsert(
    upsert: UpsertFn,
    items: Sequence[BatchUpsertItem],
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    fail_fast: bool = False,
    on_progress: ProgressFn | None = None,
) -> BatchUpsertResult:
    """Run upserts in windows of ``max_concurrency`` parallel requests.

    Each window is awaited in full before the next one starts. Item failures
    are recorded without aborting siblings; with ``fail_fast`` no further
    windows start once a window contains a failure.

    Args:
        upsert: Performs one upsert and returns the decoded response.
        items: Items to upsert.
        max_concurrency: Window size and worker count.
        fail_fast: Stop after the first window with a failure.
        on_progress: Called as ``(completed, total)`` after every item,
            from the calling thread.

    Returns:
        BatchUpsertResult with successes ordered by input position.

    Raises:
        ValueError: If max_concurrency is less than 1.
    """
    if max_concurrency < 1:
        msg = f"max_concurrency must be at least 1, got {max_concurrency}"
        raise ValueError(msg)

    total = len(items)
    log = logger.bind(component="batch", total=total, max_concurrency=max_concurrency)
    log.info("batch_upsert_started")

    succeeded: dict[int, Any] = {}
    failed: list[BatchItemError] = []
    completed = 0
    indexed = list(enumerate(items))

    with ThreadPoolExecutor(max_workers=max_concurrency) as executor:
        for start in range(0, total, max_concurrency):
            window = indexed[start : start + max_concurrency]
            future_to_index: dict[Future[Any], int] = {
                executor.submit(upsert, item): index for index, item in window
            }
            window_failed = False

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                item = items[index]
                try:
                    succeeded[index] = future.result()
                except Exception as e:  # noqa: BLE001
                    window_failed = True
                    failed.append(
                        BatchItemError(index=index, external_id=item.external_id, error=e)
                    )
                    log.warning(
                        "batch_item_failed",
                        index=index,
                        external_id=item.external_id,
                        error=str(e),
                    )
                completed += 1
                if on_progress is not None:
                    on_progress(completed, total)

            if window_failed and fail_fast:
                log.warning("batch_upsert_aborted", completed=completed)
                break

    failed.sort(key=lambda error: error.index)
    log.info("batch_upsert_complete", succeeded=len(succeeded), failed=len(failed))
    return BatchUpsertResult(
        succeeded=[succeeded[index] for index in sorted(succeeded)],
        failed=failed,
    )
