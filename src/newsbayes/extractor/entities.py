"""Replacement of HTML character references found in Reuters articles."""

from __future__ import annotations

import re

# Reference -> replacement character. Layout-only control codes become spaces.
HTML_SPECIAL_CHARS: dict[str, str] = {
    "&#1;": " ",
    "&#2;": " ",
    "&#3;": " ",
    "&#5;": "\x05",
    "&#22;": " ",
    "&#27;": " ",
    "&#30;": "\x1e",
    "&#31;": "\x1f",
    "&#127;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
}


def _decoded(reference: str) -> str:
    if reference.startswith("&#"):
        return chr(int(reference[2:-1]))
    return HTML_SPECIAL_CHARS[reference]


def _padded(reference: str) -> str:
    return " " * (len(reference) - 1) + HTML_SPECIAL_CHARS[reference]


# A reference keeps its width: all but its last character become spaces. The
# character a markup parser decoded it to is padded the same way.
_REPLACEMENTS: dict[str, str] = {
    **{reference: _padded(reference) for reference in HTML_SPECIAL_CHARS},
    **{_decoded(reference): _padded(reference) for reference in HTML_SPECIAL_CHARS},
}
_REFERENCE_RE = re.compile(
    "|".join(re.escape(key) for key in sorted(_REPLACEMENTS, key=len, reverse=True))
)


def convert_html_special_chars(text: str) -> str:
    """Replace the known character references in ``text``.

    Both literal references (``&amp;``) and the characters BeautifulSoup
    already decoded them to (``&``) are expanded to the reference's width,
    so token boundaries match the raw article. Reuters text never carries a
    bare ``&``, ``<`` or ``>``, so every such character came from a reference.
    """

    return _REFERENCE_RE.sub(lambda match: _REPLACEMENTS[match.group(0)], text)


__all__ = ["HTML_SPECIAL_CHARS", "convert_html_special_chars"]
