import os
from typing import Any

import pytest
from hypothesis import HealthCheck, settings

from edl.edl_diagnostics import DiagnosticCollector

# Subprocess runs of the CLI report coverage when started under `coverage run`.
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

settings.register_profile(
    "ci", max_examples=200, suppress_health_check=[HealthCheck.too_slow], deadline=None
)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture  # type: ignore[misc]
def sink() -> DiagnosticCollector:
    return DiagnosticCollector()


@pytest.fixture  # type: ignore[misc]
def config_file(tmp_path: Any) -> Any:
    """Writes a JSON config and returns its path."""

    def write(text: str) -> str:
        path = tmp_path / "edl.json"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write
