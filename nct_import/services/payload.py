from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import requests

from ..models.parsed_nct import ParsedCommitment, ParsedNarrative, ParsedNctData, ParsedTask

"""Hierarchy payload serialization and push.

The creation endpoint expects

    {"importHierarchy": true,
     "data": {"objectives": [...], "quarter": "...",
              "narratives": [{name, description, kr, target, metric, quarter,
                              sortOrder, commitments: [{name, type, description,
                              dri, sortOrder, tasks: [{text, isDone, sortOrder}]}]}]}}

Keys are camelCase on the wire; the dataclasses stay snake_case.
"""

__all__ = [
    "PushError",
    "task_to_dict",
    "commitment_to_dict",
    "narrative_to_dict",
    "to_payload",
    "write_payload",
    "push_payload",
]

logger = logging.getLogger(__name__)


class PushError(Exception):
    """Raised when the creation endpoint rejects or cannot receive a payload."""


def task_to_dict(task: ParsedTask) -> dict[str, Any]:
    return {"text": task.text, "isDone": task.is_done, "sortOrder": task.sort_order}


def commitment_to_dict(commitment: ParsedCommitment) -> dict[str, Any]:
    return {
        "name": commitment.name,
        "type": commitment.type,
        "description": commitment.description,
        "dri": commitment.dri,
        "sortOrder": commitment.sort_order,
        "tasks": [task_to_dict(t) for t in commitment.tasks],
    }


def narrative_to_dict(narrative: ParsedNarrative, quarter: str) -> dict[str, Any]:
    return {
        "name": narrative.name,
        "description": narrative.description,
        "kr": narrative.kr,
        "target": narrative.target,
        "metric": narrative.metric,
        "quarter": quarter,
        "sortOrder": narrative.sort_order,
        "commitments": [commitment_to_dict(c) for c in narrative.commitments],
    }


def to_payload(data: ParsedNctData) -> dict[str, Any]:
    """Build the creation-endpoint request body for a parsed spreadsheet."""
    return {
        "importHierarchy": True,
        "data": {
            "objectives": list(data.objectives),
            "quarter": data.quarter,
            "narratives": [narrative_to_dict(n, data.quarter) for n in data.narratives],
        },
    }


def write_payload(payload: dict[str, Any], path: Path) -> Path:
    """Write a payload as pretty-printed UTF-8 JSON, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return path


def push_payload(url: str, payload: dict[str, Any], *, timeout: float = 30.0) -> Any:
    """POST a payload to the creation endpoint and return the decoded response.

    Raises:
        PushError: On transport errors and non-2xx responses
    """
    logger.debug("POST %s narratives=%d", url, len(payload["data"]["narratives"]))
    try:
        response = requests.post(url, json=payload, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as http_err:
        raise PushError(f"push rejected by {url}: {http_err}") from http_err
    except requests.exceptions.RequestException as req_err:
        raise PushError(f"push to {url} failed: {req_err}") from req_err
    try:
        return response.json()
    except ValueError:
        # 本文が JSON でない 2xx も成功扱い
        return None
