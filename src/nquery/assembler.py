"""Assemble the result set for one query.

Steps:
    1. list jobs by ID prefix
    2. filter the listing (parameterized, periodic, status, type)
    3. optionally append dispatched children of parameterized jobs
    4. fetch every selected job in full, skipping jobs that vanished
    5. project each document onto the requested paths (or pass it through)

Output order always equals the order of the selected listing entries.
"""

import queue
import threading
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from .errors import NotFound
from .nomad.models import JobSummary
from .projection import JobDocument, PathExpression, ProjectedRecord, project


class JobFetcher(Protocol):
    """What the assembler needs from the Nomad API."""

    def list_by_prefix(self, prefix: str) -> List[JobSummary]: ...

    def fetch_full(
        self, job_id: str, namespace: Optional[str] = None
    ) -> JobDocument: ...

    def list_dispatched(self, parameterized_job_id: str) -> List[JobSummary]: ...


@dataclass(frozen=True)
class JobFilter:
    """Listing filters. ``None`` means "don't care"."""

    parameterized: Optional[bool] = None
    periodic: Optional[bool] = None
    status: Optional[str] = None
    job_type: Optional[str] = None

    def matches(self, job: JobSummary) -> bool:
        if (
            self.parameterized is not None
            and job.is_parameterized != self.parameterized
        ):
            return False
        if self.periodic is not None and job.is_periodic != self.periodic:
            return False
        return self.matches_attributes(job)

    def matches_attributes(self, job: JobSummary) -> bool:
        """Status and type checks only (case-insensitive)."""
        if self.status is not None and job.Status.lower() != self.status.lower():
            return False
        if self.job_type is not None and job.Type.lower() != self.job_type.lower():
            return False
        return True


@dataclass(frozen=True)
class AssembledResult:
    """Records in output order, plus the IDs skipped because they vanished."""

    records: Tuple[Union[JobDocument, ProjectedRecord], ...] = ()
    skipped: Tuple[str, ...] = ()


def _key(job: JobSummary) -> Tuple[str, str]:
    return (job.Namespace, job.ID)


class ResultAssembler:
    """Combine a JobFetcher with projection to build the result set.

    Args:
        fetcher: Nomad API access
        concurrency: Number of full fetches allowed in flight at once
        include_dispatched: Also emit the dispatched children of every
            selected parameterized job
    """

    def __init__(
        self,
        fetcher: JobFetcher,
        concurrency: int = 1,
        include_dispatched: bool = False,
    ):
        self.fetcher = fetcher
        self.concurrency = max(1, concurrency)
        self.include_dispatched = include_dispatched

    def select(self, prefix: str, job_filter: JobFilter) -> List[JobSummary]:
        """Listing entries to fetch, in output order, each appearing once."""
        selected: List[JobSummary] = []
        seen = set()

        def add(job: JobSummary) -> None:
            if _key(job) in seen:
                return
            seen.add(_key(job))
            selected.append(job)

        for job in self.fetcher.list_by_prefix(prefix):
            if not job_filter.matches(job):
                continue
            add(job)
            if self.include_dispatched and job.is_parameterized:
                for child in self.fetcher.list_dispatched(job.ID):
                    if job_filter.matches_attributes(child):
                        add(child)
        return selected

    def _fetch_one(self, job: JobSummary) -> Optional[JobDocument]:
        try:
            return self.fetcher.fetch_full(job.ID, namespace=job.Namespace or None)
        except NotFound:
            return None

    def fetch_all(
        self, jobs: Sequence[JobSummary]
    ) -> List[Optional[JobDocument]]:
        """Fetch full documents, positionally aligned with ``jobs``.

        Vanished jobs come back as None. Any other error stops the workers
        from picking up new jobs and propagates at once. Workers are daemon
        threads, so requests still in flight never hold up process exit.
        """
        if self.concurrency == 1 or len(jobs) <= 1:
            return [self._fetch_one(job) for job in jobs]

        pending = queue.Queue()
        for index, job in enumerate(jobs):
            pending.put((index, job))
        done = queue.Queue()
        stop = threading.Event()

        def worker() -> None:
            while not stop.is_set():
                try:
                    index, job = pending.get_nowait()
                except queue.Empty:
                    return
                try:
                    done.put((index, self._fetch_one(job), None))
                except BaseException as e:
                    done.put((index, None, e))

        for n in range(min(self.concurrency, len(jobs))):
            threading.Thread(
                target=worker, name=f"nquery-fetch-{n}", daemon=True
            ).start()

        documents: List[Optional[JobDocument]] = [None] * len(jobs)
        try:
            for _ in jobs:
                index, document, error = done.get()
                if error is not None:
                    raise error
                documents[index] = document
        finally:
            stop.set()
        return documents

    def assemble(
        self,
        prefix: str,
        job_filter: Optional[JobFilter] = None,
        paths: Sequence[PathExpression] = (),
    ) -> AssembledResult:
        """Run the whole query.

        Args:
            prefix: Job ID prefix, matched by the API
            job_filter: Listing filters (default: none)
            paths: Fields to project; empty means full documents

        Returns:
            AssembledResult with records in selection order
        """
        jobs = self.select(prefix, job_filter or JobFilter())
        documents = self.fetch_all(jobs)

        records = []
        skipped = []
        for job, document in zip(jobs, documents):
            if document is None:
                skipped.append(job.ID)
                continue
            records.append(project(document, paths) if paths else document)
        return AssembledResult(records=tuple(records), skipped=tuple(skipped))


__all__ = [
    "AssembledResult",
    "JobFetcher",
    "JobFilter",
    "ResultAssembler",
]
