from __future__ import annotations

import json

import pytest
from jsonschema import ValidationError

from covgate.core.collector import FailReason
from covgate.core.model.thresholds import ThresholdResult
from covgate.core.model.types import CoverageMetric
from covgate.render import format_json, render_results

RESULTS = [
    ThresholdResult(path="src", type=CoverageMetric.STATEMENTS, expected=85.0, received=80.0),
    ThresholdResult(path="global", type=CoverageMetric.BRANCHES, expected=70.0, received=62.5),
]


def test_render_human_smoke() -> None:
    out = render_results(RESULTS, width=120)

    assert "Coverage Thresholds" in out
    assert "src" in out
    assert "statements" in out
    assert "85.00%" in out
    assert "62.50%" in out
    assert "2 coverage threshold(s) not met." in out
    assert "\x1b[" not in out


def test_render_human_success() -> None:
    assert render_results([]).strip() == "All coverage thresholds met."


def test_render_human_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.delenv("NO_COLOR", raising=False)
    out = render_results(RESULTS, color=True, width=120)
    assert "\x1b[" in out


def test_format_json_payload() -> None:
    payload = json.loads(format_json(RESULTS, [FailReason.UNDER_THRESHOLD]))
    assert payload == {
        "passed": False,
        "results": [
            {"path": "src", "type": "statements", "expected": 85.0, "received": 80.0},
            {"path": "global", "type": "branches", "expected": 70.0, "received": 62.5},
        ],
        "failReasons": ["underThreshold"],
    }


def test_format_json_passed() -> None:
    assert json.loads(format_json([])) == {"passed": True, "results": [], "failReasons": []}


def test_format_json_fails_when_only_reasons_present() -> None:
    payload = json.loads(format_json([], [FailReason.REPORT_NOT_FOUND]))
    assert payload["passed"] is False
    assert payload["failReasons"] == ["reportNotFound"]


def test_format_json_validates_against_schema() -> None:
    bad = ThresholdResult(path=3, type=CoverageMetric.LINES, expected=1.0, received=0.0)  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        format_json([bad])
