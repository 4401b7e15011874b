import html
import re
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from mdit_py_plugins.tasklists import tasklists_plugin

from app.services.highlighter import CodeHighlighter
from app.services.toc import (
    FENCE_CLOSE,
    FENCE_OPEN,
    HEADING_PATTERN,
    AnchorRegistry,
    FenceTracker,
    heading_text,
    normalize_fenced_backticks,
)


def _heading_ids(state: StateCore) -> None:
    anchors = AnchorRegistry()
    tokens = state.tokens
    for idx, token in enumerate(tokens):
        # only top-level ATX headings are anchored, matching extract_toc
        if token.type != "heading_open" or token.level != 0 or not token.markup.startswith("#"):
            continue
        inline = tokens[idx + 1]
        if not inline.content.strip():
            continue
        token.attrSet("id", anchors.assign(inline.content))


class MarkdownRenderer:
    """GitHub-flavoured markdown to HTML with Pygments code highlighting."""

    def __init__(self, highlighter: CodeHighlighter):
        self.highlighter = highlighter
        self._md = (
            MarkdownIt(
                "commonmark",
                {
                    "html": False,
                    "linkify": True,
                    "highlight": self._highlight,
                    "langPrefix": f"{highlighter.css_class} language-",
                },
            )
            .enable(["table", "strikethrough", "linkify"])
            .use(tasklists_plugin)
        )
        self._md.core.ruler.push("heading_ids", _heading_ids)

    def _highlight(self, code: str, lang: str, _attrs: str) -> str:
        return self.highlighter.highlight(code, lang or None)

    def render(self, markdown: str) -> str:
        return self._md.render(normalize_fenced_backticks(markdown))


_list_item = re.compile(r"^[-*][ \t]+(.+)$")
_bold = re.compile(r"\*\*(.+?)\*\*")
_inline_code = re.compile(r"`(.+?)`")


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def render_inline(text: str) -> str:
    # escape first so document content can never inject markup
    safe = _escape(text)
    safe = _bold.sub(r"<strong>\1</strong>", safe)
    return _inline_code.sub(r"<code>\1</code>", safe)


class BasicMarkdownRenderer:
    """
    Dependency-free fallback: headings, unordered lists, fenced code,
    paragraphs, **bold** and `code`. Everything else stays literal text.
    """

    def render(self, markdown: str) -> str:
        anchors = AnchorRegistry()
        out: List[str] = []
        paragraph: List[str] = []
        code: Optional[List[str]] = None
        code_open = ""
        in_list = False
        fence = FenceTracker()

        def flush_paragraph():
            if paragraph:
                out.append(f"<p>{render_inline(' '.join(paragraph))}</p>")
                paragraph.clear()

        def close_list():
            nonlocal in_list
            if in_list:
                out.append("</ul>")
                in_list = False

        for line in normalize_fenced_backticks(markdown).splitlines():
            stripped = line.strip()
            event = fence.feed(line)
            if event == FENCE_OPEN:
                flush_paragraph()
                close_list()
                info = fence.info.split()
                code_open = (
                    f'<pre><code class="language-{html.escape(info[0])}">'
                    if info
                    else "<pre><code>"
                )
                code = []
                continue
            if event == FENCE_CLOSE:
                out.append(code_open + "".join(code) + "</code></pre>")
                code = None
                continue
            if code is not None:
                code.append(_escape(line) + "\n")
                continue

            heading = HEADING_PATTERN.match(line)
            if heading:
                flush_paragraph()
                close_list()
                level = len(heading.group(1))
                text = heading_text(heading.group(2))
                if not text:
                    out.append(f"<h{level}></h{level}>")
                    continue
                out.append(
                    f'<h{level} id="{anchors.assign(text)}">{render_inline(text)}</h{level}>'
                )
                continue

            item = _list_item.match(line)
            if item:
                flush_paragraph()
                if not in_list:
                    out.append("<ul>")
                    in_list = True
                out.append(f"<li>{render_inline(item.group(1).strip())}</li>")
                continue

            close_list()
            if stripped:
                paragraph.append(stripped)
            else:
                flush_paragraph()

        # an unterminated fence runs to the end of the document
        if code is not None:
            out.append(code_open + "".join(code) + "</code></pre>")
        flush_paragraph()
        close_list()
        return "\n".join(out)


def build_renderer(kind: str, highlighter: CodeHighlighter):
    if kind == "basic":
        return BasicMarkdownRenderer()
    return MarkdownRenderer(highlighter)
