"""Nomad HTTP API client.

Endpoints used:
    GET /v1/jobs?prefix=<prefix>   - job listing, matched by ID prefix
    GET /v1/job/<id>               - full job document

Every request has a bounded timeout. Transient failures (connection
errors, read errors, 429/502/503/504) are retried by urllib3 with
exponential backoff; 401/403/404 are never retried.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.exceptions import MaxRetryError, TimeoutError as Urllib3Timeout
from urllib3.util.retry import Retry

from ..diagnostics import NULL_TRACER, Tracer
from ..errors import AuthError, NotFound, TransportError
from ..models import Settings
from ..projection import JobDocument
from .models import JobSummary

API_VERSION = "v1"
RETRY_STATUSES = (429, 502, 503, 504)
BACKOFF_FACTOR = 0.2
DISPATCH_MARKER = "/dispatch-"


def build_session(settings: Settings) -> requests.Session:
    """Create a session with auth headers and retry policy applied."""
    session = requests.Session()
    session.headers["Accept"] = "application/json"
    if settings.token:
        session.headers["X-Nomad-Token"] = settings.token

    retry = Retry(
        total=settings.retries,
        connect=settings.retries,
        read=settings.retries,
        status=settings.retries,
        backoff_factor=BACKOFF_FACTOR,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class NomadClient:
    """Fetch job listings and job documents from a Nomad agent.

    Args:
        settings: Connection settings (address, token, namespace, ...)
        session: Optional preconfigured session (defaults to build_session)
        trace: Debug tracer for request logging
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        trace: Tracer = NULL_TRACER,
    ):
        self.settings = settings
        self.session = session or build_session(settings)
        self.trace = trace

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "NomadClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _params(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        params = {}
        if self.settings.namespace:
            params["namespace"] = self.settings.namespace
        if self.settings.region:
            params["region"] = self.settings.region
        if extra:
            params.update(extra)
        return params

    def get(self, resource: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Issue a GET against ``/v1/<resource>`` and decode the JSON body.

        Raises:
            NotFound: HTTP 404
            AuthError: HTTP 401 or 403
            TransportError: Connection failure, timeout, other non-2xx
                status, or a body that is not JSON
        """
        url = f"{self.settings.address}/{API_VERSION}/{resource}"
        try:
            response = self.session.get(
                url,
                params=self._params(params),
                timeout=self.settings.timeout,
            )
        except requests.exceptions.RequestException as e:
            self.trace(f"GET {url} -> {type(e).__name__}: {e}")
            if _timed_out(e):
                raise TransportError(
                    f"Request timed out after {self.settings.timeout}s: {url}",
                    url=url,
                ) from e
            if isinstance(e, requests.exceptions.ConnectionError):
                raise TransportError(
                    f"Could not connect to server at {self.settings.address}",
                    url=url,
                ) from e
            raise TransportError(str(e), url=url) from e

        self.trace(f"GET {response.url} -> {response.status_code}")

        if response.status_code == 404:
            raise NotFound(
                f"Not found: {resource}", url=url, status_code=404
            )
        if response.status_code in (401, 403):
            raise AuthError(
                f"{response.status_code}: {_error_text(response)}",
                url=url,
                status_code=response.status_code,
            )
        if not response.ok:
            raise TransportError(
                f"{response.status_code}: {_error_text(response)}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "failed to read response", url=url, status_code=response.status_code
            ) from e

    def list_by_prefix(self, prefix: str) -> List[JobSummary]:
        """List jobs whose ID starts with ``prefix``, in API order."""
        data = self.get("jobs", {"prefix": prefix})
        if not isinstance(data, list):
            raise TransportError("failed to read response", url="jobs")
        try:
            return [JobSummary.model_validate(item) for item in data]
        except ValidationError as e:
            raise TransportError("failed to read response", url="jobs") from e

    def fetch_full(
        self, job_id: str, namespace: Optional[str] = None
    ) -> JobDocument:
        """Fetch the full document for one job.

        Args:
            job_id: Job ID
            namespace: Namespace the job lives in (defaults to the
                configured namespace)

        Raises:
            NotFound: If the job no longer exists
        """
        params = {"namespace": namespace} if namespace else None
        data = self.get(f"job/{quote(job_id, safe='')}", params)
        if not isinstance(data, dict):
            raise TransportError("failed to read response", url=f"job/{job_id}")
        return data

    def list_dispatched(self, parameterized_job_id: str) -> List[JobSummary]:
        """List child jobs dispatched from a parameterized job."""
        children = self.list_by_prefix(parameterized_job_id + DISPATCH_MARKER)
        return [
            child for child in children if child.ParentID == parameterized_job_id
        ]


def _timed_out(exc: requests.exceptions.RequestException) -> bool:
    """True for timeouts, including ones urllib3 gave up retrying.

    Once retries are exhausted urllib3 raises MaxRetryError, which requests
    surfaces as a ConnectionError with the timeout kept as its reason.
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return True
    cause = exc.args[0] if exc.args else None
    return isinstance(cause, MaxRetryError) and isinstance(
        cause.reason, Urllib3Timeout
    )


def _error_text(response: requests.Response) -> str:
    """Best-effort error text: response body, falling back to the reason."""
    text = response.text.strip()
    return text or response.reason or "request failed"


__all__ = ["NomadClient", "build_session"]
