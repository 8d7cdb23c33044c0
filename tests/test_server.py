"""Tests for the development server."""

from __future__ import annotations

import socket
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from pager.build import build_site
from pager.exceptions import ServeError
from pager.server import create_app, find_open_port, run_server
from pager.server.routers.live import LIVE_RELOAD_SCRIPT, inject_reload_script
from pager.watch import WatchSession


class TestInjectReloadScript:
    """Tests for inject_reload_script."""

    def test_inserted_before_first_body_close(self) -> None:
        """The listener goes right before the first </body>."""
        page = "<html><body><p>x</p></body></html>"
        assert inject_reload_script(page) == (
            f"<html><body><p>x</p>{LIVE_RELOAD_SCRIPT}\n  </body></html>"
        )

    def test_only_first_occurrence(self) -> None:
        """A literal </body> later in the page is left alone."""
        page = "<body></body><pre></body></pre>"
        assert inject_reload_script(page).count(LIVE_RELOAD_SCRIPT) == 1
        assert inject_reload_script(page).endswith("<pre></body></pre>")

    def test_page_without_body_is_unchanged(self) -> None:
        """Pages with no </body> are returned as is."""
        assert inject_reload_script("<p>fragment</p>") == "<p>fragment</p>"

    def test_script_listens_on_reload_path(self) -> None:
        """The listener subscribes to the reload stream and reloads on message."""
        assert LIVE_RELOAD_SCRIPT == (
            '<script>new EventSource("/_reload").onmessage=()=>location.reload()</script>'
        )


class TestLiveApp:
    """Tests for the application routes."""

    @pytest.fixture
    def client(self, site_dir: Path):
        session = WatchSession(site_dir, build=MagicMock())
        with TestClient(create_app(session, watch=False)) as client:
            yield client

    @pytest.mark.parametrize("path", ["/", "/index.html"])
    def test_page_has_reload_script(self, client: TestClient, site_dir: Path, path: str) -> None:
        """The built page is served with the live-reload listener."""
        build_site(site_dir)
        response = client.get(path)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert LIVE_RELOAD_SCRIPT in response.text
        assert "</main>" in response.text

    def test_file_on_disk_is_not_modified(self, client: TestClient, site_dir: Path) -> None:
        """Injection happens on the response only."""
        build_site(site_dir)
        client.get("/")
        assert LIVE_RELOAD_SCRIPT not in (site_dir / "index.html").read_text(encoding="utf-8")

    def test_page_not_built(self, client: TestClient) -> None:
        """Before the first build the page is a 404."""
        response = client.get("/")
        assert response.status_code == 404

    def test_static_files_are_served(self, client: TestClient) -> None:
        """Other files in the content directory are served unchanged."""
        response = client.get("/style.css")
        assert response.status_code == 200
        assert response.text == "body { margin: 0; }\n"

    def test_unknown_file(self, client: TestClient) -> None:
        """Missing static files are a 404."""
        assert client.get("/missing.css").status_code == 404

    def test_session_is_not_started_without_watch(self, site_dir: Path) -> None:
        """With watch disabled the lifespan only stops the session."""
        session = MagicMock(spec=WatchSession)
        session.directory = site_dir
        with TestClient(create_app(session, watch=False)):
            pass
        session.start.assert_not_called()
        session.stop.assert_called_once_with()


class TestFindOpenPort:
    """Tests for find_open_port."""

    def test_skips_busy_port(self) -> None:
        """An occupied port is skipped in favour of a later one."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
            busy.bind(("127.0.0.1", 0))
            busy.listen()
            port = busy.getsockname()[1]
            found = find_open_port("127.0.0.1", port, attempts=20)
        assert port < found < port + 20

    def test_gives_up_after_attempts(self) -> None:
        """When every candidate is busy, a ServeError is raised."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
            busy.bind(("127.0.0.1", 0))
            busy.listen()
            port = busy.getsockname()[1]
            with pytest.raises(ServeError, match="1 attempts"):
                find_open_port("127.0.0.1", port, attempts=1)


class TestRunServer:
    """Tests for run_server."""

    def test_builds_then_serves(self, site_dir: Path) -> None:
        """The page is built before uvicorn starts, on the first free port."""
        with patch("pager.server.runner.uvicorn.run") as uvicorn_run, patch(
            "pager.server.runner.find_open_port", return_value=8123
        ) as find_port, patch("pager.server.runner.webbrowser.open") as browser_open:
            run_server(site_dir, host="127.0.0.1", port=8080)

        assert (site_dir / "index.html").exists()
        find_port.assert_called_once_with("127.0.0.1", 8080)
        browser_open.assert_called_once_with("http://localhost:8123")
        assert uvicorn_run.call_args.kwargs["port"] == 8123
        assert uvicorn_run.call_args.kwargs["host"] == "127.0.0.1"

    def test_no_browser(self, site_dir: Path) -> None:
        """open_browser=False leaves the browser alone."""
        with patch("pager.server.runner.uvicorn.run"), patch(
            "pager.server.runner.find_open_port", return_value=8080
        ), patch("pager.server.runner.webbrowser.open") as browser_open:
            run_server(site_dir, open_browser=False)
        browser_open.assert_not_called()

    def test_initial_build_failure_propagates(self, tmp_path: Path) -> None:
        """Without a buildable site the server never starts."""
        from pager.exceptions import BuildError

        with patch("pager.server.runner.uvicorn.run") as uvicorn_run:
            with pytest.raises(BuildError):
                run_server(tmp_path, open_browser=False)
        uvicorn_run.assert_not_called()
