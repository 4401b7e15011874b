import re
from typing import Dict, List, NamedTuple, Union

import frontmatter
from frontmatter.default_handlers import BaseHandler

FrontmatterValue = Union[str, int, float, bool, List[str]]
Frontmatter = Dict[str, FrontmatterValue]

REQUIRED_FIELDS = ("title", "date", "summary")

_number = re.compile(r"^-?\d+(\.\d+)?$")


class ParsedDocument(NamedTuple):
    frontmatter: Frontmatter
    body: str


class KeyValueHandler(BaseHandler):
    """
    Flat ``key: value`` front matter between two ``---`` lines.

    Values are not YAML: quoted strings, ``[a, b]`` lists, booleans and
    numbers are recognised, anything else stays a string.
    """

    FM_BOUNDARY = re.compile(r"^---\r?$", re.MULTILINE)
    START_DELIMITER = END_DELIMITER = "---"

    def split(self, text: str):
        head, fm, content = self.FM_BOUNDARY.split(text, 2)
        if head:
            raise ValueError("front matter must open on the first line")
        return fm, content

    def load(self, fm: str) -> Frontmatter:
        metadata: Frontmatter = {}
        for line in fm.splitlines():
            key, sep, value = line.partition(":")
            if not sep:
                continue
            key, value = key.strip(), value.strip()
            if not key or not value:
                continue
            metadata[key] = coerce_value(value)
        return metadata


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"')


def _unquote(value: str) -> str:
    return value[1:-1] if _is_quoted(value) else value


def coerce_value(value: str) -> FrontmatterValue:
    if _is_quoted(value):
        return value[1:-1]
    if value.startswith("[") and value.endswith("]"):
        items = (_unquote(item.strip()) for item in value[1:-1].split(","))
        return [item for item in items if item]
    if value in ("true", "false"):
        return value == "true"
    if _number.match(value):
        return float(value) if "." in value else int(value)
    return value


handler = KeyValueHandler()


def parse_frontmatter(text: str) -> ParsedDocument:
    """Split a raw document into its front matter and markdown body."""
    # the block only counts when it opens at offset 0
    if not handler.detect(text):
        return ParsedDocument({}, text.strip())

    # an unclosed block comes back as ({}, whole document)
    metadata, body = frontmatter.parse(text, handler=handler)
    return ParsedDocument(metadata, body)


def missing_required_fields(metadata: Frontmatter) -> List[str]:
    return [field for field in REQUIRED_FIELDS if metadata.get(field) in (None, "")]
