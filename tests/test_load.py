from __future__ import annotations

from pathlib import Path

import pytest

from covgate.errors import CoverageReportNotFoundError, InvalidCoverageReportError
from covgate.inputs import cobertura, istanbul
from covgate.inputs.load import load_report


def test_load_json_report(write_report, jest_report) -> None:
    loaded = load_report(write_report(jest_report))
    assert loaded.extract is istanbul.file_coverage_map
    assert len(loaded.extract(loaded.report)) == 4


def test_load_xml_report(cobertura_xml_file) -> None:
    loaded = load_report(cobertura_xml_file([("/src/mod.py", {1: 1})]))
    assert loaded.extract is cobertura.file_coverage_map
    assert list(loaded.extract(loaded.report)) == ["/src/mod.py"]


def test_missing_report(tmp_path: Path) -> None:
    with pytest.raises(CoverageReportNotFoundError, match="coverage report not found"):
        load_report(tmp_path / "missing.json")


@pytest.mark.parametrize(
    ("content", "pattern"),
    [
        ("{not json", "failed to parse coverage JSON"),
        ("[1, 2]", "must contain an object"),
    ],
)
def test_invalid_json_report(tmp_path: Path, content: str, pattern: str) -> None:
    path = tmp_path / "coverage-final.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(InvalidCoverageReportError, match=pattern):
        load_report(path)
