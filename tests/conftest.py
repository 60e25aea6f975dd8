import sys
from types import SimpleNamespace

import pytest
from starlette.requests import Request

from ytmp4.config.settings import config
from ytmp4.core.state import state

# Stand-in for yt-dlp: honours -o/--merge-output-format/--audio-format and
# behaves according to FAKE_YTDLP_* environment variables.
FAKE_YTDLP = '''#!__PYTHON__
import os
import sys
import time

args = sys.argv[1:]

log = os.environ.get("FAKE_YTDLP_ARGS")
if log:
    with open(log, "w", encoding="utf-8") as f:
        f.write("\\n".join(args))

mode = os.environ.get("FAKE_YTDLP_MODE", "ok")

sys.stdout.write("[download] Destination: somewhere\\n")
sys.stdout.flush()

if mode == "fail":
    sys.stderr.write(os.environ.get("FAKE_YTDLP_STDERR", "ERROR: Video unavailable"))
    sys.exit(1)

if mode == "hang":
    time.sleep(60)
    sys.exit(0)

if mode == "ok":
    template = args[args.index("-o") + 1]
    if "-x" in args:
        ext = args[args.index("--audio-format") + 1]
    else:
        ext = args[args.index("--merge-output-format") + 1]
    title = os.environ.get("FAKE_YTDLP_TITLE", "Test Video")
    path = template.replace("%(title)s", title).replace("%(ext)s", ext)
    with open(path, "wb") as f:
        f.write(os.environ.get("FAKE_YTDLP_BODY", "media-bytes").encode())

# mode == "empty": succeed without producing anything
sys.exit(0)
'''


@pytest.fixture
def fake_ytdlp(tmp_path, monkeypatch):
    """Point the service at a scripted yt-dlp and a private temp root"""
    script = tmp_path / "yt-dlp"
    script.write_text(FAKE_YTDLP.replace("__PYTHON__", sys.executable), encoding="utf-8")
    script.chmod(0o755)

    work_root = tmp_path / "work"
    work_root.mkdir()
    args_log = tmp_path / "args.txt"

    monkeypatch.setattr(config.ytdlp, "binary", str(script))
    monkeypatch.setattr(config.download, "temp_root", str(work_root))
    monkeypatch.setattr(config.download, "timeout_ms", 20_000)
    monkeypatch.setattr(state, "cookies_file", None)
    monkeypatch.setenv("FAKE_YTDLP_ARGS", str(args_log))
    for name in ("FAKE_YTDLP_MODE", "FAKE_YTDLP_STDERR", "FAKE_YTDLP_TITLE", "FAKE_YTDLP_BODY"):
        monkeypatch.delenv(name, raising=False)

    def args():
        return args_log.read_text(encoding="utf-8").split("\n")

    def workspaces():
        return list(work_root.iterdir())

    return SimpleNamespace(
        script=script,
        work_root=work_root,
        args_log=args_log,
        args=args,
        workspaces=workspaces,
    )


@pytest.fixture
def http_request():
    """Bare request object for calling services directly"""
    return Request({"type": "http", "method": "GET", "path": "/download", "headers": []})
