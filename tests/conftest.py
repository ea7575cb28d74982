"""Pytest configuration and shared fixtures."""

import json
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread
from urllib.parse import parse_qs, unquote, urlparse

import pytest
from click.testing import CliRunner

from nquery.cli import cli
from tests.helpers import summarize

NOMAD_ENV_VARS = (
    "NOMAD_ADDR",
    "NOMAD_TOKEN",
    "NOMAD_NAMESPACE",
    "NOMAD_REGION",
    "NQUERY_TIMEOUT",
    "NQUERY_RETRIES",
    "NQUERY_CONCURRENCY",
    "NQUERY_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_nomad_env(monkeypatch):
    """Keep the developer's Nomad environment out of the tests."""
    for name in NOMAD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class FakeNomadHandler(BaseHTTPRequestHandler):
    """Serves /v1/jobs and /v1/job/<id> from ``server.documents``."""

    def log_message(self, format, *args):
        """Suppress request logging."""
        pass

    def _send_json(self, status, payload):
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_text(self, status, text):
        body = text.encode()
        self.send_response(status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        server = self.server
        parsed = urlparse(self.path)
        query = {
            k: v[0]
            for k, v in parse_qs(parsed.query, keep_blank_values=True).items()
        }
        server.requests.append(
            {
                "path": parsed.path,
                "query": query,
                "token": self.headers.get("X-Nomad-Token"),
            }
        )

        if server.delay:
            time.sleep(server.delay)

        failures = server.flaky.get(parsed.path, 0)
        if failures:
            server.flaky[parsed.path] = failures - 1
            self._send_text(502, "bad gateway")
            return

        if server.required_token and (
            self.headers.get("X-Nomad-Token") != server.required_token
        ):
            self._send_text(403, "Permission denied")
            return

        if parsed.path == "/v1/jobs":
            if server.listing_status != 200:
                self._send_text(server.listing_status, "listing failed")
                return
            prefix = query.get("prefix", "")
            self._send_json(
                200,
                [
                    summarize(doc)
                    for doc in server.documents
                    if doc["ID"].startswith(prefix)
                ],
            )
        elif parsed.path.startswith("/v1/job/"):
            job_id = unquote(parsed.path[len("/v1/job/"):])
            if job_id in server.garbled:
                self._send_text(200, "not json")
                return
            doc = next(
                (d for d in server.documents if d["ID"] == job_id), None
            )
            if doc is None or job_id in server.missing:
                self._send_text(404, "job not found")
                return
            self._send_json(200, doc)
        else:
            self._send_text(404, "unknown endpoint")


@pytest.fixture
def nomad_server():
    """Start a fake Nomad agent on a random local port.

    Tests populate ``server.documents`` (and optionally ``missing``,
    ``garbled``, ``listing_status``, ``required_token``) before querying.
    ``delay`` stalls every response; ``flaky`` maps a path to the number
    of 502 responses it returns before answering normally.
    """
    server = HTTPServer(("127.0.0.1", 0), FakeNomadHandler)
    server.documents = []
    server.missing = set()
    server.garbled = set()
    server.listing_status = 200
    server.required_token = None
    server.requests = []
    server.delay = 0
    server.flaky = {}
    server.address = f"http://127.0.0.1:{server.server_address[1]}"
    thread = Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner, nomad_server):
    """Invoke the CLI against the fake Nomad server.

    Usage:
        result = invoke(["redis", "-f", "ID"])
        json.loads(result.stdout), result.stderr, result.exit_code
    """

    def _invoke(args, env=None):
        full_env = {"NOMAD_ADDR": nomad_server.address, "NQUERY_RETRIES": "0"}
        full_env.update(env or {})
        return cli_runner.invoke(cli, args, env=full_env)

    return _invoke
