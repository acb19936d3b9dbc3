"""
Text sanitizing and length ceilings for user-submitted content.

Every string that ends up in a company document passes through here:
script blocks are dropped, remaining tags are stripped, whitespace is
trimmed and the result is cut to the field's ceiling.
"""

import re
from typing import Any, Iterable, List

# Field ceilings (characters)
MAX_QUESTION = 500
MAX_SOLUTION = 500
MAX_PROCESS_STEP = 500
MAX_TOPIC = 200
MAX_MCQ_QUESTION = 300
MAX_MCQ_OPTION = 100
MAX_JD_TITLE = 100
MAX_ELIGIBILITY = 500
MAX_BUSINESS_MODEL = 100
MAX_COMPANY_NAME = 50
MAX_ROLE_NAME = 50

_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
# An opening <script> with no closing tag swallows the rest of the text
_UNCLOSED_SCRIPT = re.compile(r"<script\b[^>]*>.*\Z", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")


def sanitize(text: Any) -> str:
    """Strip <script> blocks and all other tags, then trim. None -> ''."""
    if text is None:
        return ""
    value = text if isinstance(text, str) else str(text)
    value = _SCRIPT_BLOCK.sub("", value)
    value = _UNCLOSED_SCRIPT.sub("", value)
    value = _TAG.sub("", value)
    return value.strip()


def truncate(text: Any, max_len: int) -> str:
    """
    Sanitize, then hard-cut to `max_len` characters.

    The result is never longer than `max_len`.
    """
    value = sanitize(text)
    if len(value) > max_len:
        value = value[:max_len].rstrip()
    return value


def clean_list(values: Iterable[Any], max_len: int) -> List[str]:
    """Sanitize + truncate every entry and drop the ones left empty."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    cleaned = []
    for v in values:
        item = truncate(v, max_len)
        if item:
            cleaned.append(item)
    return cleaned


def dedupe(values: Iterable[str]) -> List[str]:
    """Drop repeated entries, keeping first-seen order."""
    seen = set()
    result = []
    for v in values:
        if v not in seen:
            seen.add(v)
            result.append(v)
    return result
