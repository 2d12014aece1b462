import stat
import sys
import textwrap
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import handlers.health
import services.ytdlp
from server import create_app


@pytest.fixture
def fake_ytdlp(tmp_path, monkeypatch):
    """Install a throwaway ``yt-dlp`` whose body is the given Python source."""

    def install(body: str) -> Path:
        script = tmp_path / "yt-dlp"
        source = f"#!{sys.executable}\n" + textwrap.dedent(body)
        script.write_text(source, encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        monkeypatch.setattr(services.ytdlp, "YTDLP_PATH", str(script))
        monkeypatch.setattr(handlers.health, "YTDLP_PATH", str(script))
        return script

    return install


@pytest.fixture
def client():
    with TestClient(create_app()) as c:
        yield c
