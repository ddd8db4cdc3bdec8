"""Helpers for inspecting rendered bpm.yml documents."""

from __future__ import annotations

from typing import Any

import yaml

from .core.errors import BpmDocumentError


def load_document(text: str) -> dict[str, Any]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise BpmDocumentError(f"Rendered bpm.yml is not valid YAML: {e}") from e
    if not isinstance(document, dict):
        raise BpmDocumentError("Rendered bpm.yml must be a mapping")
    return document


def process(document: dict[str, Any], index: int) -> dict[str, Any]:
    """Return the process entry at ``index`` of a bpm document."""
    processes = document.get("processes")
    if not isinstance(processes, list):
        raise BpmDocumentError("bpm.yml is missing a 'processes' list")
    if not 0 <= index < len(processes):
        raise BpmDocumentError(
            f"bpm.yml has {len(processes)} process(es), no entry at index {index}"
        )
    return processes[index]
