"""
Text post-processing between generation steps.

生成步骤之间的文本后处理：标题清理、场景列表解析、字数与时长估算。
"""
import json
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List

DEFAULT_TITLE = "Untitled Crime Story"

# Narration speed range used for the duration estimate (words per minute)
FAST_WORDS_PER_MINUTE = 150
SLOW_WORDS_PER_MINUTE = 130

_CODE_FENCE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)
_QUOTES = "\"'“”‘’"


def script_excerpt(script: str, limit: int = 500) -> str:
    """First `limit` characters of the script followed by an ellipsis"""
    return f"{script[:limit]}..."


def clean_title(text: str, fallback: str = DEFAULT_TITLE) -> str:
    """
    清理模型返回的标题

    Strips whitespace and a pair of wrapping quotes; falls back when empty.
    """
    title = (text or "").strip()
    if len(title) >= 2 and title[0] in _QUOTES and title[-1] in _QUOTES:
        title = title[1:-1].strip()
    return title or fallback


def strip_code_fence(text: str) -> str:
    """Remove a Markdown code fence wrapping the whole text"""
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def _scene_to_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        text_values = [v for v in item.values() if isinstance(v, str)]
        if len(text_values) == 1:
            return text_values[0]
    return json.dumps(item, ensure_ascii=False)


def parse_scene_descriptions(
    text: str,
    max_fallback: int = 10,
    min_line_length: int = 20
) -> List[str]:
    """
    解析场景描述列表

    The model is asked for a JSON array of strings. When the reply is not a
    JSON array, fall back to its lines: keep those longer than
    `min_line_length` characters (after stripping), at most `max_fallback`.

    Args:
        text: Raw model reply
        max_fallback: Line cap for the plain-text fallback
        min_line_length: Lines this short or shorter are dropped

    Returns:
        Scene descriptions in order
    """
    content = strip_code_fence(text or "[]")

    try:
        parsed = json.loads(content)
    except (json.JSONDecodeError, RecursionError):
        parsed = None

    if isinstance(parsed, list):
        return [_scene_to_text(item) for item in parsed]

    lines = [line.strip() for line in content.split("\n")]
    return [line for line in lines if len(line) > min_line_length][:max_fallback]


def count_words(text: str) -> int:
    """Whitespace-separated word count"""
    return len((text or "").split())


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def estimate_duration(word_count: int) -> str:
    """
    估算旁白时长

    Returns:
        Range such as "10-12 minutes" between the fast and slow reading pace
    """
    low = _round_half_up(word_count / FAST_WORDS_PER_MINUTE)
    high = _round_half_up(word_count / SLOW_WORDS_PER_MINUTE)
    return f"{low}-{high} minutes"
