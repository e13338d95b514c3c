"""Shared fixtures: an isolated home/project layout and a mock HEAD-only registry."""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from socketserver import ThreadingMixIn
from typing import Iterator

import pytest

from nrs_core import NrsPaths


class _ThreadedServer(ThreadingMixIn, HTTPServer):
    daemon_threads = True
    allow_reuse_address = True


class _MockRegistryHandler(BaseHTTPRequestHandler):
    server_version = "MockRegistry/1.0"
    protocol_version = "HTTP/1.1"

    def do_HEAD(self) -> None:
        status = 200 if self.path.startswith("/ok") else 404
        self.send_response(status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format: str, *args: object) -> None:
        return


@pytest.fixture()
def registry_server() -> Iterator[str]:
    """Yield the base URL of a registry answering 200 under ``/ok`` and 404 elsewhere."""

    server = _ThreadedServer(("127.0.0.1", 0), _MockRegistryHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture()
def nrs_paths(tmp_path: Path) -> NrsPaths:
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    return NrsPaths(home_override=home, cwd_override=project, env={})
