"""Minimal HTML size reduction before content is sent to an extractor.

Only bodies that never carry question text or links are dropped (scripts,
styles, comments, inline SVG). Navigation and footers stay because the
"Next" link usually lives there.
"""

from __future__ import annotations

import re

_DROP_BLOCKS = ("script", "style", "noscript", "svg", "iframe")


def clean_html(raw_html: str) -> str:
    """Strip non-content element bodies, comments, and redundant whitespace."""
    text = raw_html
    for tag in _DROP_BLOCKS:
        text = re.sub(
            rf"<{tag}[^>]*>.*?</{tag}>", "", text, flags=re.DOTALL | re.IGNORECASE
        )
    text = re.sub(r"<!--.*?-->", "", text, flags=re.DOTALL)
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r">\s*<", ">\n<", text)
    return text.strip()
