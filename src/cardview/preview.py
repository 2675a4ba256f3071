"""Card preview extraction from markdown notes."""

import re

from .constants import DEFAULT_PREVIEW_CHAR_LIMIT

_SENTENCE_END = re.compile(r"[.!?]\s")


def strip_frontmatter(content: str) -> str:
    """Remove a leading "---" delimited YAML block, if there is one."""
    if content.startswith("---"):
        end = content.find("\n---", 3)
        if end != -1:
            return content[end + 4 :]
    return content


def is_empty_note(content: str) -> bool:
    """Return True if the note has nothing but (optional) frontmatter."""
    return not strip_frontmatter(content).strip()


def _find_safe_truncation_point(text: str) -> str:
    """Cut text at a sentence end, paragraph break or word boundary.

    Sentence ends and paragraph breaks are only used when they fall within
    the last 100 characters, and word boundaries within the last 50;
    otherwise the text is returned unchanged.
    """
    last_sentence_end = -1
    for match in _SENTENCE_END.finditer(text):
        last_sentence_end = match.start() + 1
    if last_sentence_end > 0 and last_sentence_end > len(text) - 100:
        return text[:last_sentence_end]

    last_paragraph = text.rfind("\n\n")
    if last_paragraph > 0 and last_paragraph > len(text) - 100:
        return text[:last_paragraph]

    last_space = max(text.rfind(" "), text.rfind("\n"))
    if last_space > 0 and last_space > len(text) - 50:
        return text[:last_space]

    return text


def _close_code_fences(text: str) -> str:
    if text.count("```") % 2 == 1:
        return text + "\n```"
    return text


def extract_preview(content: str, char_limit: int = DEFAULT_PREVIEW_CHAR_LIMIT) -> str:
    """Extract the start of a note for display on a card.

    Args:
        content: Full markdown content of the note.
        char_limit: Maximum number of body characters to keep.

    Returns:
        The body (without frontmatter), truncated at a safe boundary with any
        open code fence closed and " ..." appended when something was cut.

    Examples:
        >>> extract_preview("---\\ntitle: x\\n---\\nHello.")
        'Hello.'
    """
    if not content:
        return ""

    body = strip_frontmatter(content)
    if len(body) <= char_limit:
        return body.strip()

    truncated = _find_safe_truncation_point(body[:char_limit])
    truncated = _close_code_fences(truncated)
    return (truncated.rstrip() + " ...").strip()
