from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonschema import validate

from covgate.config import get_schema

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covgate.core.collector import FailReason
    from covgate.core.model.thresholds import ThresholdResult


def format_json(results: Sequence[ThresholdResult], fail_reasons: Sequence[FailReason] = ()) -> str:
    """Render threshold results as JSON validated against the bundled results schema."""
    payload: dict[str, object] = {
        "passed": not results and not fail_reasons,
        "results": [r.to_dict() for r in results],
        "failReasons": [reason.value for reason in fail_reasons],
    }

    validate(payload, get_schema("results"))
    return json.dumps(payload, indent=2)


__all__ = ["format_json"]
