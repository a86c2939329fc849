"""Extraction core — tag scanning, per-group state, template rendering.

- Tags: <tag>...</tag> region extraction from model output
- State: latest extracted contents per conversation group
- Ingest: model response -> group state, with request correlation
- Render: {name} / {tag} substitution for command output
"""

from .tags import extract_tag_content, extract_all
from .state import GroupStateStore
from .ingest import ResponseIngestor
from .render import render_template, fallback_text

__all__ = [
    # Tags
    "extract_tag_content",
    "extract_all",
    # State
    "GroupStateStore",
    # Ingest
    "ResponseIngestor",
    # Render
    "render_template",
    "fallback_text",
]
