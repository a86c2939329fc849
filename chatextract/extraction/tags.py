"""Response tag extraction — pull <tag>...</tag> regions out of LLM output.

The model embeds hidden sections in its reply text, e.g.:

  <think>嗯？新人？</think>
  <memory>1.[临时] 群友打招呼</memory>

This is a delimited-region scanner, not an XML parser: no nesting,
no attributes, no entity decoding. Only the exact delimiters of the
requested tag are significant; anything else inside is literal text.
"""

import re
from typing import Iterable, Optional

# Separator between multiple occurrences of the same tag
JOIN_SEPARATOR = "\n\n"


def _tag_pattern(tag: str) -> re.Pattern:
    # Lazy body: the first closing delimiter ends the match
    name = re.escape(tag)
    return re.compile(rf"<{name}>([\s\S]*?)</{name}>", re.IGNORECASE)


def extract_tag_content(text: str, tag: str) -> Optional[str]:
    """Extract the content of every <tag>...</tag> region in text.

    Args:
        text: Raw model response
        tag: Tag name without angle brackets

    Returns:
        None if the tag does not occur, otherwise the stripped contents
        joined by a blank line in document order.
    """
    if not text or not tag:
        return None

    matches = [m.group(1).strip() for m in _tag_pattern(tag).finditer(text)]
    if not matches:
        return None
    return JOIN_SEPARATOR.join(matches)


def extract_all(text: str, tags: Iterable[str]) -> dict[str, str]:
    """Run extract_tag_content for each tag, keeping only non-empty results."""
    found = {}
    for tag in tags:
        content = extract_tag_content(text, tag)
        if content:
            found[tag] = content
    return found
