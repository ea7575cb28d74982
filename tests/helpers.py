"""Shared builders and fakes for nquery tests."""

import time

from nquery.errors import NotFound
from nquery.nomad.models import JobSummary


def make_job(
    job_id,
    meta=None,
    parameterized=False,
    periodic=False,
    parent_id="",
    status="running",
    job_type="service",
    namespace="default",
):
    """Build a trimmed-down Nomad job document."""
    return {
        "ID": job_id,
        "ParentID": parent_id,
        "Name": job_id,
        "Namespace": namespace,
        "Type": job_type,
        "Status": status,
        "Meta": meta,
        "Periodic": (
            {"Enabled": True, "Spec": "*/5 * * * *", "SpecType": "cron"}
            if periodic
            else None
        ),
        "ParameterizedJob": (
            {"Payload": "optional", "MetaRequired": ["data-source"]}
            if parameterized
            else None
        ),
        "Dispatched": bool(parent_id),
        "TaskGroups": [
            {
                "Name": "main",
                "Count": 1,
                "Tasks": [{"Name": "main", "Driver": "docker", "Meta": None}],
            }
        ],
    }


def summarize(document):
    """Listing entry for a job document, as /v1/jobs returns it."""
    return {
        "ID": document["ID"],
        "ParentID": document["ParentID"],
        "Name": document["Name"],
        "Namespace": document["Namespace"],
        "Type": document["Type"],
        "Status": document["Status"],
        "Periodic": document["Periodic"] is not None,
        "ParameterizedJob": document["ParameterizedJob"] is not None,
        "JobSummary": {"JobID": document["ID"], "Children": None},
    }


class FakeFetcher:
    """In-memory JobFetcher.

    Args:
        documents: Job documents, in listing order
        missing: IDs that are listed but 404 on full fetch
        errors: Map of ID to exception raised on full fetch
        delays: Map of ID to seconds slept before a full fetch returns
    """

    def __init__(self, documents, missing=(), errors=None, delays=None):
        self.documents = list(documents)
        self.missing = set(missing)
        self.errors = errors or {}
        self.delays = delays or {}
        self.fetched = []
        self.dispatched_queries = []

    def list_by_prefix(self, prefix):
        return [
            JobSummary.model_validate(summarize(doc))
            for doc in self.documents
            if doc["ID"].startswith(prefix)
        ]

    def fetch_full(self, job_id, namespace=None):
        self.fetched.append(job_id)
        time.sleep(self.delays.get(job_id, 0))
        if job_id in self.errors:
            raise self.errors[job_id]
        if job_id in self.missing:
            raise NotFound(f"Not found: job/{job_id}", status_code=404)
        return next(doc for doc in self.documents if doc["ID"] == job_id)

    def list_dispatched(self, parameterized_job_id):
        self.dispatched_queries.append(parameterized_job_id)
        return [
            summary
            for summary in self.list_by_prefix(parameterized_job_id + "/dispatch-")
            if summary.ParentID == parameterized_job_id
        ]
