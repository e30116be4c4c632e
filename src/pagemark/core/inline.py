"""Inline formatting: escape a phrase, then apply link, code and emphasis rules"""

import re
from typing import Callable

from markdown_it.common.utils import escapeHtml


# Converted fragments are parked behind private-use markers so later rules
# cannot match inside or across them.
_OPEN, _CLOSE = "\ue000", "\ue001"
_STASH_RE = re.compile(f"{_OPEN}(\\d+){_CLOSE}")


def _span(delim: str) -> str:
    """Non-greedy body for a delimiter pair: no delimiter chars, no stashed fragments."""
    return f"([^{re.escape(delim)}{_OPEN}{_CLOSE}]+)"


BREAK_RE  = re.compile(r"&lt;br\s*/?&gt;", re.IGNORECASE)
LINK_RE   = re.compile(rf"\[{_span(']')}\]\({_span(')')}\)")
CODE_RE   = re.compile(rf"`{_span('`')}`")
BOLD_RES  = (re.compile(rf"\*\*{_span('*')}\*\*"), re.compile(rf"__{_span('_')}__"))
ITAL_RES  = (re.compile(rf"\*{_span('*')}\*"), re.compile(rf"_{_span('_')}_"))
STRIKE_RE = re.compile(rf"~~{_span('~')}~~")

SCHEME_RE    = re.compile(r"^([a-z][a-z0-9+.-]*):")
HIDDEN_RE    = re.compile(r"[\x00-\x20]+")
SAFE_SCHEMES = {"http", "https", "mailto"}


def _escape_angles(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def _safe_href(url: str) -> str:
    """Neutralise targets whose scheme could run script; relative targets pass."""
    m = SCHEME_RE.match(HIDDEN_RE.sub("", url).lower())
    return url if m is None or m.group(1) in SAFE_SCHEMES else "#"


def _link(m: re.Match) -> str:
    label = BREAK_RE.sub("<br>", _escape_angles(m.group(1)))
    return (
        f'<a href="{_safe_href(m.group(2))}" class="md-link" target="_blank" '
        f'rel="noopener noreferrer">{label}</a>'
    )


def _code(m: re.Match) -> str:
    # a restored <br> is shown literally inside code
    return f'<code class="inline-code">{_escape_angles(m.group(1))}</code>'


def _wrap(tag: str) -> Callable[[re.Match], str]:
    return lambda m: f"<{tag}>{m.group(1)}</{tag}>"


# Fixed precedence; each rule sees only text the previous rules left unconverted.
RULES: list[tuple[re.Pattern, Callable[[re.Match], str]]] = [
    (LINK_RE, _link),
    (CODE_RE, _code),
    *((r, _wrap("strong")) for r in BOLD_RES),
    *((r, _wrap("em")) for r in ITAL_RES),
    (STRIKE_RE, _wrap("del")),
]


def format_inline(text: str) -> str:
    """Return safe inline markup for a single line or phrase of raw text.

    Everything is escaped first; only the line-break marker is restored
    verbatim. Unmatched delimiters stay as literal escaped text.
    """
    if not text:
        return ""
    text = text.replace(_OPEN, "").replace(_CLOSE, "")
    out = BREAK_RE.sub("<br>", escapeHtml(text))

    stash: list[str] = []

    def _park(markup: str) -> str:
        stash.append(markup)
        return f"{_OPEN}{len(stash) - 1}{_CLOSE}"

    for pattern, render in RULES:
        out = pattern.sub(lambda m: _park(render(m)), out)
    return _STASH_RE.sub(lambda m: stash[int(m.group(1))], out)
