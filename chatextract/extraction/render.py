"""Template rendering — fill command formats with extracted tag contents.

Variables:
  {name}   — character display name (first occurrence only)
  {<tag>}  — content of a configured tag (every occurrence)

Anything else in braces is left as written.
"""

import re
from typing import Iterable, Mapping, Optional

NAME_PLACEHOLDER = "{name}"


def fallback_text(tag: str) -> str:
    """Marker shown when a tag has no content."""
    return f"（无{tag}内容）"


def render_template(
    fmt: str,
    display_name: str,
    contents: Optional[Mapping[str, str]],
    tags: Iterable[str],
) -> str:
    """Render a command format.

    Args:
        fmt: Format string, e.g. "{name}在想：{think}"
        display_name: Replaces the first {name}
        contents: tag -> extracted content for the group
        tags: Configured tag names; only these are treated as variables

    Returns:
        The substituted string.
    """
    contents = contents or {}
    # Only the first {name} is replaced
    result = fmt.replace(NAME_PLACEHOLDER, display_name, 1)

    names = [t for t in dict.fromkeys(tags) if t]
    if not names:
        return result

    pattern = re.compile(r"\{(" + "|".join(re.escape(t) for t in names) + r")\}")

    def _sub(m: re.Match) -> str:
        tag = m.group(1)
        return contents.get(tag) or fallback_text(tag)

    return pattern.sub(_sub, result)
