"""
SEO Engine Backend: Server Entry Point Tests
===============================================

What:  serve() binds uvicorn to the configured port and no other; main()
       turns configuration and manifest failures into exit code 1.
How:   uvicorn.run is replaced with a recorder, so no socket is opened.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI

from seo_engine import server
from seo_engine.config import Settings


@pytest.fixture
def uvicorn_run(monkeypatch):
    """Recorder standing in for uvicorn.run."""
    run = MagicMock()
    monkeypatch.setattr(server.uvicorn, "run", run)
    # setup_logging(force=True) would detach pytest's capture handlers
    monkeypatch.setattr("seo_engine.main.setup_logging", lambda *args, **kwargs: None)
    return run


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)


class TestServe:
    def test_binds_default_port(self, uvicorn_run):
        server.serve()

        uvicorn_run.assert_called_once()
        args, kwargs = uvicorn_run.call_args
        assert isinstance(args[0], FastAPI)
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 3000

    def test_restart_with_new_port_binds_there(self, uvicorn_run, monkeypatch):
        monkeypatch.setenv("PORT", "4010")
        server.serve()
        monkeypatch.setenv("PORT", "5020")
        server.serve()

        ports = [call.kwargs["port"] for call in uvicorn_run.call_args_list]
        assert ports == [4010, 5020]

    def test_explicit_settings_win(self, uvicorn_run, monkeypatch):
        monkeypatch.setenv("PORT", "4010")

        server.serve(Settings(port=9090, host="127.0.0.1"))

        kwargs = uvicorn_run.call_args.kwargs
        assert (kwargs["host"], kwargs["port"]) == ("127.0.0.1", 9090)

    def test_log_level_passed_lowercase(self, uvicorn_run, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        server.serve()

        assert uvicorn_run.call_args.kwargs["log_level"] == "error"


class TestMain:
    def test_clean_run_exits_zero(self, uvicorn_run):
        assert server.main() == 0
        uvicorn_run.assert_called_once()

    def test_invalid_port_exits_one(self, uvicorn_run, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")

        assert server.main() == 1
        uvicorn_run.assert_not_called()

    def test_broken_manifest_exits_one(self, uvicorn_run, monkeypatch):
        monkeypatch.setattr("seo_engine.docs.manifest.TAGS_METADATA", [])

        assert server.main() == 1
        uvicorn_run.assert_not_called()
