"""Tests for server-level functions and configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
from fastmcp import FastMCP

from rqmt_redline.config import get_db_path, get_log_level, is_manager_mode
from rqmt_redline.server import create_server, lifespan


def test_create_server():
    server = create_server()
    assert isinstance(server, FastMCP)
    assert server.name == "rqmt-redline"


def test_config_defaults():
    with patch.dict("os.environ", {}, clear=True):
        assert get_db_path() == Path("~/.local/share/rqmt_redline/versions.db").expanduser()
        assert get_log_level() == "WARNING"
        assert is_manager_mode() is False


def test_config_from_env():
    with patch.dict(
        "os.environ",
        {"RM_DB_PATH": "/tmp/x.db", "RM_LOG_LEVEL": "debug", "RM_MANAGER": "true"},
    ):
        assert get_db_path() == Path("/tmp/x.db")
        assert get_log_level() == "DEBUG"
        assert is_manager_mode() is True


@pytest.mark.asyncio
async def test_lifespan_provides_services(tmp_path):
    with patch.dict("os.environ", {"RM_DB_PATH": str(tmp_path / "v.db")}):
        async with lifespan(create_server()) as context:
            assert {"db", "versioning", "links"} <= set(context)
            history = await context["versioning"].get_history("requirement", 1)
            assert history == []
