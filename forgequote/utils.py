import json
import logging
import sys
import re
from typing import Any, List

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


def setup_logger(name: str):
    """Set up a standard logger."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(handler)
    return logger


def safe_filename(text: str) -> str:
    """
    Convert text to a safe filename by replacing special characters.

    Args:
        text: the text to make safe

    Returns:
        A filesystem-safe string
    """
    return re.sub(r'[\\/*?:"<>| ]+', "_", text)


def strip_markdown_fences(text: str) -> str:
    """Remove ```json / ``` markers the model adds despite being told not to."""
    return _FENCE_PATTERN.sub("", text or "").strip()


def extract_json(text: str) -> Any:
    """
    Best-effort extraction of the JSON value embedded in a model answer.

    The fenced/trimmed answer is parsed as-is first. When the model wraps the
    object in prose, the span from the first opening bracket to the last
    matching closing bracket is tried instead.

    Raises:
        ValueError: if no JSON value can be recovered
    """
    cleaned = strip_markdown_fences(text)
    if not cleaned:
        raise ValueError("AI response is empty")

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("{", "}"), ("[", "]")):
        start = cleaned.find(opener)
        end = cleaned.rfind(closer)
        if start == -1 or end <= start:
            continue
        try:
            return json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError:
            continue

    raise ValueError("AI response is not valid JSON")


def extract_items(data: Any) -> List[Any]:
    """Return the item list from either {"items": [...]} or a bare list."""
    if isinstance(data, dict):
        items = data.get("items")
        if isinstance(items, list) and items:
            return items
    if isinstance(data, list):
        return data
    return []
