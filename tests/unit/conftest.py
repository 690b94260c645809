"""Shared test fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from bpmn_finder.logging_config import configure_logging
from bpmn_finder.models.match import SourceFile
from tests.unit.samples import BILLING_BPMN, BROKEN_BPMN, ONBOARDING_BPMN, UNNAMED_BPMN


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Point loguru back at the real stderr after CLI runs swap it out."""
    yield
    configure_logging(verbose=False)


@pytest.fixture
def sources() -> list[SourceFile]:
    """Three parseable documents in three folders."""
    return [
        SourceFile(path="processes/hr/onboarding.bpmn", content=ONBOARDING_BPMN),
        SourceFile(path="processes/finance/billing.bpmn", content=BILLING_BPMN),
        SourceFile(path="processes/misc/anonymous.xml", content=UNNAMED_BPMN),
    ]


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """A directory tree with searchable, archived and unrelated files."""
    root = tmp_path / "processes"
    files = {
        "hr/onboarding.bpmn": ONBOARDING_BPMN,
        "finance/billing.bpmn": BILLING_BPMN,
        "misc/anonymous.xml": UNNAMED_BPMN,
        "misc/broken.bpmn": BROKEN_BPMN,
        "hr/Old/onboarding-v1.bpmn": ONBOARDING_BPMN,
        "hr/notes.txt": "SubProcA",
    }
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root
