"""Pytest configuration and fixtures for gradletiming tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from gradletiming.core.log import ConsoleSink, setup_logger


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logger at debug level, nothing sent anywhere."""
    test_log_root = Path(tempfile.gettempdir()) / "gradletiming-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv around State construction."""
    original = sys.argv.copy()
    sys.argv = ["gradletiming"]
    yield
    sys.argv = original


@pytest.fixture
def build_logs(tmp_path):
    """Directory with two listener-style logs and one without timings."""
    logs = tmp_path / "buildings"
    logs.mkdir()
    (logs / "out1000.txt").write_text(
        "------BUILD PROTOCOL------\n"
        "     120 ms \t :app:compileDebugJavaWithJavac\n"
        "      45 ms \t :app:mergeDebugResources\n"
    )
    (logs / "out2000.txt").write_text(
        "------BUILD PROTOCOL------\n"
        "     300 ms \t :app:compileDebugJavaWithJavac\n"
    )
    (logs / "out3000.txt").write_text("------BUILD PROTOCOL------\n")
    return logs
