"""
Markdown to HTML rendering for post bodies.

Uses mistune for markdown (GFM-style tables, strikethrough and autolinks,
single newlines rendered as line breaks) and a pluggable highlighter for
fenced code blocks. Highlighting problems never fail a render: the block falls
back to auto-detection, then to escaped plain text.
"""

import html
from typing import Optional, Protocol

import mistune
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from folio.contexts.content.logger import _log_debug

HIGHLIGHT_CSS_CLASS = "highlight"

MARKDOWN_PLUGINS = ["table", "strikethrough", "url"]


class CodeHighlighter(Protocol):
    """Interface of a syntax highlighting engine."""

    def is_language_supported(self, language: str) -> bool: ...

    def highlight(self, text: str, language: str) -> str: ...

    def highlight_auto(self, text: str) -> str: ...


class PygmentsHighlighter:
    """
    CodeHighlighter backed by Pygments.

    Produces bare token spans (no wrapping element); the renderer supplies the
    surrounding <pre><code>. Style the output with the CSS from
    ``HtmlFormatter().get_style_defs(".highlight")``.
    """

    def __init__(self):
        self._formatter = HtmlFormatter(nowrap=True)

    def is_language_supported(self, language: str) -> bool:
        if not language:
            return False
        try:
            get_lexer_by_name(language)
        except ClassNotFound:
            return False
        return True

    def highlight(self, text: str, language: str) -> str:
        """
        Highlight text with a named lexer.

        Raises:
            pygments.util.ClassNotFound: If the language is unknown
        """
        lexer = get_lexer_by_name(language)
        return pygments_highlight(text, lexer, self._formatter)

    def highlight_auto(self, text: str) -> str:
        """
        Highlight text with a guessed lexer.

        Raises:
            pygments.util.ClassNotFound: If no lexer can be guessed
        """
        lexer = guess_lexer(text)
        return pygments_highlight(text, lexer, self._formatter)


class _HighlightingHTMLRenderer(mistune.HTMLRenderer):
    """mistune HTML renderer that routes fenced code through a CodeHighlighter."""

    def __init__(self, highlighter: CodeHighlighter, escape: bool = False):
        super().__init__(escape=escape)
        self.highlighter = highlighter

    def block_code(self, code: str, info: Optional[str] = None) -> str:
        language = info.split()[0] if info and info.strip() else ""
        body = highlight_code(self.highlighter, code, language)

        code_class = f' class="language-{html.escape(language)}"' if language else ""
        return f'<pre class="{HIGHLIGHT_CSS_CLASS}"><code{code_class}>{body}</code></pre>\n'


def highlight_code(highlighter: CodeHighlighter, code: str, language: str = "") -> str:
    """
    Highlight a code block, degrading instead of failing.

    Order of attempts:
    1. The tagged language, if the highlighter supports it
    2. Automatic language detection
    3. HTML-escaped raw text

    Args:
        highlighter: Highlighting engine
        code: Code block contents
        language: Language tag from the fence info string (may be empty)

    Returns:
        HTML for the inside of a <code> element
    """
    if language and highlighter.is_language_supported(language):
        try:
            return highlighter.highlight(code, language)
        except Exception as e:
            _log_debug(f"Highlighting as '{language}' failed ({e!r}), trying auto-detection")

    try:
        return highlighter.highlight_auto(code)
    except Exception as e:
        _log_debug(f"Auto-detection failed ({e!r}), emitting plain code")

    return html.escape(code)


class MarkupRenderer:
    """
    Converts post bodies from markdown to HTML.

    The output is meant for direct injection into a page; trust-marking it is
    the caller's job. With ``escape_html=False`` (the default) raw HTML inside
    the markdown is passed through, as standard markdown does.

    Example:
        renderer = MarkupRenderer()
        html = renderer.render("Hello\\nworld")
        # '<p>Hello<br />\\nworld</p>\\n'
    """

    def __init__(self, highlighter: CodeHighlighter = None, escape_html: bool = False):
        self.highlighter = highlighter if highlighter is not None else PygmentsHighlighter()
        self._markdown = mistune.create_markdown(
            renderer=_HighlightingHTMLRenderer(self.highlighter, escape=escape_html),
            hard_wrap=True,
            plugins=MARKDOWN_PLUGINS,
        )

    def render(self, body: str) -> str:
        """Render markdown body text to HTML."""
        if not body:
            return ""
        return self._markdown(body)
