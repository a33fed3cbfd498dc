from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from covgate.core.model.metrics import CoverageCounts, FileCoverage

IstanbulEntry = dict[str, Any]


def istanbul_entry(
    path: str,
    *,
    statements: Sequence[int] = (),
    statement_lines: Sequence[int] | None = None,
    functions: Sequence[int] = (),
    branches: Sequence[Sequence[int]] = (),
) -> IstanbulEntry:
    """Build an istanbul file coverage object from plain hit counts.

    Each statement sits on its own line unless *statement_lines* says otherwise.
    """
    lines = list(statement_lines) if statement_lines is not None else list(range(1, len(statements) + 1))
    return {
        "path": path,
        "statementMap": {
            str(i): {"start": {"line": line, "column": 0}, "end": {"line": line, "column": 10}}
            for i, line in enumerate(lines)
        },
        "fnMap": {str(i): {"name": f"fn{i}", "line": 1} for i in range(len(functions))},
        "branchMap": {str(i): {"type": "if", "line": 1, "locations": []} for i in range(len(branches))},
        "s": {str(i): hits for i, hits in enumerate(statements)},
        "f": {str(i): hits for i, hits in enumerate(functions)},
        "b": {str(i): list(arms) for i, arms in enumerate(branches)},
    }


# Relative path -> (statements, functions, branches)
SAMPLE_FILES: dict[str, tuple[list[int], list[int], list[list[int]]]] = {
    # statements 9/10, branches 3/4, functions 2/2, lines 9/10
    "src/stages/runTest.ts": ([1, 1, 1, 1, 1, 1, 1, 1, 1, 0], [3, 1], [[1, 1], [2, 0]]),
    # statements 4/4, branches 0/2, functions 1/1, lines 4/4
    "src/format/details/getNewFilesCoverage.ts": ([2, 2, 1, 1], [1], [[0, 0]]),
    # statements 3/6, no branches, functions 1/2, lines 3/6
    "src/format/formatCoverage.ts": ([1, 1, 1, 0, 0, 0], [1, 0], []),
    # statements 4/5, branches 2/2, functions 1/1, lines 4/5
    "lib/util.ts": ([1, 1, 1, 1, 0], [1], [[1, 1]]),
}


@pytest.fixture
def sample_files() -> dict[str, tuple[list[int], list[int], list[list[int]]]]:
    return dict(SAMPLE_FILES)


@pytest.fixture
def project_root() -> Path:
    return Path("/home/user/project")


@pytest.fixture
def build_report() -> Callable[..., dict[str, Any]]:
    def build(root: Path | str, files: Mapping[str, tuple[list[int], list[int], list[list[int]]]] = SAMPLE_FILES):
        prefix = Path(root).as_posix()
        coverage_map = {}
        for rel, (statements, functions, branches) in files.items():
            path = f"{prefix}/{rel}"
            coverage_map[path] = istanbul_entry(path, statements=statements, functions=functions, branches=branches)
        return {"numTotalTests": 3, "success": True, "coverageMap": coverage_map}

    return build


@pytest.fixture
def jest_report(build_report: Callable[..., dict[str, Any]], project_root: Path) -> dict[str, Any]:
    """A Jest ``--json`` report rooted at :func:`project_root`."""
    return build_report(project_root)


@pytest.fixture
def coverage() -> Callable[..., FileCoverage]:
    def make(
        statements: tuple[int, int] | None = (1, 1),
        branches: tuple[int, int] | None = (1, 1),
        functions: tuple[int, int] | None = (1, 1),
        lines: tuple[int, int] | None = (1, 1),
    ) -> FileCoverage:
        def c(pair: tuple[int, int] | None) -> CoverageCounts | None:
            return None if pair is None else CoverageCounts(covered=pair[0], total=pair[1])

        return FileCoverage(statements=c(statements), branches=c(branches), functions=c(functions), lines=c(lines))

    return make


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[..., Path]:
    def write(report: Mapping[str, Any], *, filename: str = "report.json") -> Path:
        path = tmp_path / filename
        path.write_text(json.dumps(report), encoding="utf-8")
        return path

    return write


@pytest.fixture
def cobertura_xml_content() -> Callable[..., str]:
    def build(
        classes: Sequence[tuple[str, Mapping[int, int | tuple[int, str]]]],
        *,
        sources: str | None = None,
        methods: Mapping[str, Mapping[str, Mapping[int, int]]] | None = None,
    ) -> str:
        """*classes* holds ``(filename, {line: hits | (hits, condition-coverage)})`` pairs."""
        methods = methods or {}
        parts: list[str] = []
        for filename, lines in classes:
            line_xml = []
            for number, spec in lines.items():
                if isinstance(spec, tuple):
                    hits, cond = spec
                    line_xml.append(
                        f'<line number="{number}" hits="{hits}" branch="true" condition-coverage="{cond}"/>'
                    )
                else:
                    line_xml.append(f'<line number="{number}" hits="{spec}"/>')
            method_xml = "".join(
                f'<method name="{name}" signature="()"><lines>'
                + "".join(f'<line number="{n}" hits="{h}"/>' for n, h in mlines.items())
                + "</lines></method>"
                for name, mlines in methods.get(filename, {}).items()
            )
            methods_block = f"<methods>{method_xml}</methods>" if method_xml else ""
            parts.append(f'<class filename="{filename}">{methods_block}<lines>{"".join(line_xml)}</lines></class>')
        sources_xml = f"<sources><source>{sources}</source></sources>" if sources else ""
        return (
            "<coverage>"
            f"{sources_xml}"
            f"<packages><package><classes>{''.join(parts)}</classes></package></packages>"
            "</coverage>"
        )

    return build


@pytest.fixture
def cobertura_xml_file(tmp_path: Path, cobertura_xml_content: Callable[..., str]) -> Callable[..., Path]:
    def write(*args: Any, filename: str = "coverage.xml", **kwargs: Any) -> Path:
        xml_file = tmp_path / filename
        xml_file.write_text(cobertura_xml_content(*args, **kwargs), encoding="utf-8")
        return xml_file

    return write


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI runner for invoking the command-line interface."""
    return CliRunner()
