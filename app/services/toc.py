import re
from typing import Dict, List, Optional

from app.schemas.content import TocItem
from app.utils import slugify

HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)[ \t]*$")
CLOSING_HASHES = re.compile(r"(?:^|[ \t]+)#+$")
FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")

FALLBACK_ANCHOR = "section"
FENCE_OPEN = "open"
FENCE_CLOSE = "close"

_escaped_fence = re.compile(r"^([ \t]*)\\(```)", re.MULTILINE)


def normalize_fenced_backticks(markdown: str) -> str:
    """
    Unescape ``\\```lang`` / ``\\```` fence lines so they parse as real fences.
    Must run before the markdown is tokenized or scanned for headings.
    """
    return _escaped_fence.sub(r"\1\2", markdown)


class FenceTracker:
    """
    Follows fenced code blocks line by line.
    An opening fence is 3+ backticks or tildes indented at most 3 spaces;
    it closes on a bare fence of the same character that is at least as long.
    An unclosed fence runs to the end of the document.
    """

    def __init__(self):
        self.marker: Optional[str] = None
        self.info = ""

    @property
    def inside(self) -> bool:
        return self.marker is not None

    def feed(self, line: str) -> Optional[str]:
        match = FENCE_PATTERN.match(line)
        if match is None:
            return None
        marker, rest = match.group(1), match.group(2)
        if self.marker is None:
            # backtick fences may not carry backticks in their info string
            if marker[0] == "`" and "`" in rest:
                return None
            self.marker = marker
            self.info = rest.strip()
            return FENCE_OPEN
        if marker[0] == self.marker[0] and len(marker) >= len(self.marker) and not rest.strip():
            self.marker = None
            self.info = ""
            return FENCE_CLOSE
        return None


class AnchorRegistry:
    """
    Hands out heading anchors for one document.
    Repeated slugs get a counter suffix: ``id``, ``id-2``, ``id-3``.
    """

    def __init__(self):
        self._seen: Dict[str, int] = {}

    def assign(self, text: str) -> str:
        base = slugify(text) or FALLBACK_ANCHOR
        count = self._seen.get(base, 0) + 1
        self._seen[base] = count
        anchor = base if count == 1 else f"{base}-{count}"
        # a suffixed anchor may itself collide with a literal heading text
        while anchor != base and anchor in self._seen:
            count += 1
            self._seen[base] = count
            anchor = f"{base}-{count}"
        if anchor != base:
            self._seen[anchor] = 1
        return anchor


def heading_text(raw: str) -> str:
    """Strip optional closing hashes from an ATX heading's text; may return ""."""
    return CLOSING_HASHES.sub("", raw.strip()).strip()


def extract_toc(markdown: str) -> List[TocItem]:
    anchors = AnchorRegistry()
    toc: List[TocItem] = []
    fence = FenceTracker()

    for line in normalize_fenced_backticks(markdown).splitlines():
        if fence.feed(line) or fence.inside:
            continue

        match = HEADING_PATTERN.match(line)
        if not match:
            continue
        text = heading_text(match.group(2))
        if not text:
            continue
        toc.append(
            TocItem(level=len(match.group(1)), text=text, id=anchors.assign(text))
        )

    return toc
