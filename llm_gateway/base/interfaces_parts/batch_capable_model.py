"""BatchCapableModel Protocol (single-class module).

Capability extension implemented by models declaring ``batch_processing``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional, Protocol, runtime_checkable

from ..models import BatchJob, BatchRequest, BatchResult, ListBatchOptions

if TYPE_CHECKING:
    from ..cancellation import CancellationToken


@runtime_checkable
class BatchCapableModel(Protocol):
    """Asynchronous bulk-submission lifecycle.

    ``submit_batch`` fails fast if any item fails outbound mapping.
    ``download_batch_results`` is valid only for completed jobs and yields
    results lazily; a second call re-fetches from the vendor.
    ``cancel_batch_job`` is best effort; observe ``cancelled`` via polling.
    """

    def submit_batch(self, request: BatchRequest) -> BatchJob:
        ...

    def get_batch_job(self, job_id: str) -> BatchJob:
        ...

    def list_batch_jobs(self, options: Optional[ListBatchOptions] = None) -> List[BatchJob]:
        ...

    def download_batch_results(
        self,
        job: BatchJob,
        *,
        token: Optional["CancellationToken"] = None,
    ) -> Iterator[BatchResult]:
        ...

    def cancel_batch_job(self, job_id: str) -> None:
        ...


__all__ = ["BatchCapableModel"]
