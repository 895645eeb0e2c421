"""Fixtures that start the server as a subprocess for integration tests."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, TypedDict

import pytest

from tests.utils.http import reserve_port, wait_for_port

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SERVER_ENTRYPOINT = PROJECT_ROOT / "main.py"
LOOPBACK = "127.0.0.1"


class ServerProcessInfo(TypedDict):
    """Where a running test server listens and what it serves."""

    base_url: str
    host: str
    port: int
    directory: Path
    process: subprocess.Popen[str]
    log_file: Path | None


def server_command(
    host: str, port: int, directory: Path, extra_args: list[str] | None = None
) -> list[str]:
    """Command line for running ``main.py`` against ``directory``."""

    return [
        sys.executable,
        str(SERVER_ENTRYPOINT),
        "--directory",
        str(directory),
        "--host",
        host,
        "--port",
        str(port),
        *(extra_args or []),
    ]


def _stop(process: subprocess.Popen[str]) -> None:
    if process.poll() is None:
        process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait(timeout=5)


def _dump_output(process: subprocess.Popen[str]) -> None:
    process.terminate()
    stdout, stderr = process.communicate(timeout=5)
    print(f"\nServer stdout:\n{stdout}")
    print(f"\nServer stderr:\n{stderr}")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root, the working directory of server subprocesses."""

    return PROJECT_ROOT


@pytest.fixture(name="server_process")
def _server_process(
    tmp_path_factory: "TempPathFactory",
) -> Iterator[ServerProcessInfo]:
    """Run a server on a free loopback port with JSON logs in a temp file."""

    port = reserve_port(LOOPBACK)
    directory = tmp_path_factory.mktemp("server-files")
    log_file = tmp_path_factory.mktemp("server-logs") / "server.log"
    command = server_command(
        LOOPBACK, port, directory, ["--log-destination", str(log_file)]
    )

    with subprocess.Popen(
        command,
        cwd=PROJECT_ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    ) as process:
        try:
            wait_for_port(LOOPBACK, port)
        except Exception:
            _dump_output(process)
            raise

        try:
            yield {
                "base_url": f"http://{LOOPBACK}:{port}",
                "host": LOOPBACK,
                "port": port,
                "directory": directory,
                "process": process,
                "log_file": log_file,
            }
        finally:
            _stop(process)


@pytest.fixture()
def base_url(server_process: ServerProcessInfo) -> str:
    """HTTP base URL of the running test server."""

    return server_process["base_url"]
