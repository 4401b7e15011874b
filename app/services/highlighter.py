import logging
from typing import Optional

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)


class CodeHighlighter:
    """
    Pygments-backed highlighter for fenced code blocks.
    Build one per application and hand it to the renderer.
    """

    def __init__(self, style: str = "default", css_class: str = "highlight"):
        self.css_class = css_class
        self.formatter = HtmlFormatter(nowrap=True, style=style, cssclass=css_class)

    def get_lexer(self, lang: Optional[str]):
        if not lang:
            return TextLexer(stripnl=False)
        try:
            return get_lexer_by_name(lang.lower(), stripnl=False)
        except ClassNotFound:
            logger.debug(f"No lexer for '{lang}', falling back to plain text")
            return TextLexer(stripnl=False)

    def highlight(self, code: str, lang: Optional[str] = None) -> str:
        """Return escaped HTML spans for ``code``; never wraps in <pre>."""
        return pygments_highlight(code, self.get_lexer(lang), self.formatter)

    def stylesheet(self) -> str:
        return self.formatter.get_style_defs(f".{self.css_class}")
