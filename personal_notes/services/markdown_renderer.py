from __future__ import annotations

import markdown as md

from personal_notes.core.sanitize import sanitize_note_html

_PALETTE = {
    "light": {"fg": "#1f2328", "code_bg": "#f5f5f5", "link": "#0969da"},
    "dark": {"fg": "#e6edf3", "code_bg": "#2d333b", "link": "#58a6ff"},
}


class MarkdownRenderer:
    """Turns note content into safe HTML for the viewer pane."""

    def __init__(self, *, extensions: list[str] | None = None):
        self.extensions = extensions or ["fenced_code", "tables", "nl2br"]

    def render_body(self, text: str) -> str:
        if not (text or "").strip():
            return ""
        rendered = md.markdown(text, extensions=self.extensions)
        return sanitize_note_html(rendered)

    def render_page(self, text: str, *, theme: str = "light") -> str:
        colors = _PALETTE.get(theme, _PALETTE["light"])
        body = self.render_body(text) or "<p><em>No content.</em></p>"
        return f"""\
<html>
<head>
  <meta charset="utf-8"/>
  <style>
    body {{ color: {colors["fg"]}; line-height: 1.5; }}
    code, pre {{ background: {colors["code_bg"]}; }}
    a {{ color: {colors["link"]}; text-decoration: none; }}
  </style>
</head>
<body>{body}</body>
</html>
"""
