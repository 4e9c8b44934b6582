"""
Pytest configuration for the tfstate-sources test suite.

Provides:
- A Loguru-to-caplog bridge so tests can assert on emitted diagnostics
- Terraform state document fixtures
- A helper fixture for building state directory trees under ``tmp_path``
"""

import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict

# Add the src directory to the Python path
src_path = str(Path(__file__).parent.parent / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import pytest
from hypothesis import HealthCheck, settings
from loguru import logger

# The autouse log bridge below is function-scoped; it carries no state between
# Hypothesis examples.
settings.register_profile(
    "tfstate-sources",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("tfstate-sources")


# ============================================================================
# LOGURU INTEGRATION
# ============================================================================

class PropagateHandler(logging.Handler):
    """Forward Loguru records into the standard logging tree for caplog."""

    def emit(self, record):
        logging.getLogger(record.name or "tfstate_sources").handle(record)


@pytest.fixture(autouse=True)
def capture_loguru_logs(caplog):
    """Route every Loguru message into pytest's caplog for the duration of a test."""
    caplog.set_level(logging.DEBUG)
    handler_id = logger.add(
        PropagateHandler(),
        format="{message}",
        level="DEBUG",
        enqueue=False,
    )

    yield

    with contextlib.suppress(ValueError):
        logger.remove(handler_id)


@pytest.fixture
def recording_logger():
    from tests.utils import RecordingLogger

    return RecordingLogger()


# ============================================================================
# STATE DOCUMENT FIXTURES
# ============================================================================

@pytest.fixture
def state_document() -> Dict[str, Any]:
    """A small but complete version 4 Terraform state document."""
    return {
        "version": 4,
        "terraform_version": "1.5.7",
        "serial": 3,
        "lineage": "8c3f1c2e-6b0d-4c55-a1f4-1d1b2e7a9a10",
        "outputs": {
            "bucket_name": {"value": "assets-prod", "type": "string"},
        },
        "resources": [
            {
                "mode": "managed",
                "type": "aws_s3_bucket",
                "name": "assets",
                "provider": "provider[\"registry.terraform.io/hashicorp/aws\"]",
                "instances": [{"schema_version": 0, "attributes": {"bucket": "assets-prod"}}],
            },
            {
                "module": "module.network",
                "mode": "data",
                "type": "aws_vpc",
                "name": "main",
                "provider": "provider[\"registry.terraform.io/hashicorp/aws\"]",
                "instances": [],
            },
        ],
        "check_results": None,
    }


@pytest.fixture
def state_bytes(state_document) -> bytes:
    return json.dumps(state_document).encode("utf-8")


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Build a directory tree under ``tmp_path / "states"``.

    Keys are relative paths; ``bytes``/``str`` values become file contents and
    ``None`` creates an empty directory.
    """

    def _make(files: Dict[str, Any]) -> Path:
        root = tmp_path / "states"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            target = root / relative
            if content is None:
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _make
