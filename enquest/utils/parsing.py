import re
import json

import markdown

from enquest.utils.logging_utils import get_logger

logger = get_logger("CONTENT_GEN")

ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)


def extract_json_array(raw):
    """
    Pull the first top-level bracketed array literal out of free-form model
    output. Returns the parsed list, or None when there is no match, the match
    is not valid JSON, or it does not decode to a list.
    """
    if not raw:
        return None
    match = ARRAY_PATTERN.search(raw)
    if not match:
        logger.debug("No array literal found in model output")
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse array literal: {e}")
        return None
    if not isinstance(parsed, list):
        return None
    return parsed


def clean_strings(items):
    """Drop empty entries and stringify the rest."""
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


def fit_to_count(items, count, fallback):
    """
    Truncate items to count, padding from the fallback list (skipping
    entries already present) when the model returned too few.
    """
    result = list(items[:count])
    for extra in fallback:
        if len(result) >= count:
            break
        if extra not in result:
            result.append(extra)
    return result


def parse_markdown(md_text, output="text"):
    """Render a markdown reply as HTML, or strip it down to plain text."""
    if not md_text:
        return ""
    if output == "html":
        return markdown.markdown(md_text)
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", md_text)
    text = re.sub(r"(\*\*|\*|__|_)(.*?)\1", r"\2", text)
    text = re.sub(r"#+\s*(.*)", r"\1", text)
    text = re.sub(r"^\s*[-*]\s+", "- ", text, flags=re.MULTILINE)
    text = re.sub(r"\n{2,}", "\n", text)
    return text.strip()
