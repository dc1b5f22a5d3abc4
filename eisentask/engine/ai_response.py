"""Sanitization of AI task-parsing and task-sorting responses.

Language-model output is untrusted. Every field is checked and corrected here
before it reaches the task store; recurrence candidates go through the same
validator as any other raw recurrence value. Nothing in this module raises on a
malformed payload.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

from dateutil.parser import isoparse

from eisentask.models.constants import DEFAULT_COMPLEXITY, DEFAULT_QUADRANT
from eisentask.models.recurrence import RecurrenceSpec
from eisentask.models.task import Complexity, Quadrant
from eisentask.recurrence.normalize import validate_recurrence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedTask:
    """Trusted result of parsing free-text task input."""
    title: str
    description: Optional[str]
    deadline: Optional[date]
    quadrant: Quadrant
    recurrence: Optional[RecurrenceSpec]
    complexity: Complexity


@dataclass(frozen=True)
class SortedTask:
    """Trusted placement suggestion for an existing task."""
    text: str
    quadrant: Quadrant
    complexity: Complexity
    recurrence: Optional[RecurrenceSpec]


def parse_json_payload(content: str) -> Any:
    """Decode a JSON response, tolerating markdown code fences.

    Returns None when the content is not valid JSON.
    """
    content = (content or "").strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        logger.warning(f"AI response is not valid JSON: {content[:100]!r}")
        return None


def _clean_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _sanitize_quadrant(value: Any) -> Quadrant:
    try:
        return Quadrant(value)
    except ValueError:
        logger.warning(f"Invalid quadrant {value!r} from AI. Using {DEFAULT_QUADRANT.value}.")
        return DEFAULT_QUADRANT


def _sanitize_complexity(value: Any) -> Complexity:
    if value is None:
        return DEFAULT_COMPLEXITY
    try:
        return Complexity(str(value).lower())
    except ValueError:
        logger.warning(f"Invalid complexity {value!r} from AI. Using {DEFAULT_COMPLEXITY.value}.")
        return DEFAULT_COMPLEXITY


def _sanitize_deadline(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return isoparse(value.strip()).date()
    except ValueError:
        logger.warning(f"Invalid deadline {value!r} from AI. Dropping it.")
        return None


def _sanitize_recurrence(value: Any) -> Optional[RecurrenceSpec]:
    spec = validate_recurrence(value)
    if spec is None and value is not None:
        logger.warning(f"Invalid recurrence {value!r} from AI. Treating task as non-recurring.")
    return spec


def sanitize_parsed_task(raw: Any, *, fallback_text: str) -> ParsedTask:
    """Turn a parse-task response into trusted values.

    Args:
        raw: Decoded response object (anything)
        fallback_text: The user's original input, used when the title is missing

    Returns:
        ParsedTask with defaults substituted for every invalid field
    """
    if not isinstance(raw, dict):
        logger.warning(f"AI parse response is a {type(raw).__name__}, not an object. Using defaults.")
        raw = {}

    title = _clean_text(raw.get("title")) or fallback_text.strip()
    description = _clean_text(raw.get("description")) or None

    return ParsedTask(
        title=title,
        description=description,
        deadline=_sanitize_deadline(raw.get("deadline")),
        quadrant=_sanitize_quadrant(raw.get("quadrant")),
        recurrence=_sanitize_recurrence(raw.get("recurrence")),
        complexity=_sanitize_complexity(raw.get("complexity")),
    )


def sanitize_sorted_tasks(raw: Any) -> List[SortedTask]:
    """Turn a sort-tasks response into trusted placements.

    Items that are not objects or have no text are dropped.
    """
    if not isinstance(raw, list):
        logger.warning(f"AI sort response is a {type(raw).__name__}, not a list. Ignoring it.")
        return []

    out: List[SortedTask] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        text = _clean_text(item.get("text"))
        if not text:
            continue
        out.append(
            SortedTask(
                text=text,
                quadrant=_sanitize_quadrant(item.get("quadrant")),
                complexity=_sanitize_complexity(item.get("complexity")),
                recurrence=_sanitize_recurrence(item.get("recurrence")),
            )
        )
    return out
