"""PDF export for generated worksheets.

Parses worksheet Markdown with markdown-it (CommonMark) and lays the token
stream out on A4 pages with reportlab: headings, blockquote callouts,
numbered and bulleted lists, horizontal rules and plain paragraphs.
"""

import io
from xml.sax.saxutils import escape as xml_escape

from markdown_it import MarkdownIt
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Table, TableStyle, HRFlowable, Preformatted,
)


# ──────────────────────────────────────────────
# Colours
# ──────────────────────────────────────────────
_PRIMARY = colors.Color(0.11, 0.30, 0.55)       # brand blue
_CALLOUT_BG = colors.Color(0.93, 0.96, 0.99)    # summary callout bg
_MUTED = colors.Color(0.55, 0.55, 0.55)         # muted grey
_RULE = colors.Color(0.80, 0.82, 0.86)          # rule colour


# ──────────────────────────────────────────────
# Unicode → latin-1 safe replacements
# ──────────────────────────────────────────────
_UNICODE_REPLACEMENTS = {
    "—": "-",   # em dash
    "–": "-",   # en dash
    "‘": "'",   # left single quote
    "’": "'",   # right single quote
    "“": '"',   # left double quote
    "”": '"',   # right double quote
    "…": "...", # ellipsis
    "×": "x",   # multiplication sign
    "÷": "/",   # division sign
    "≤": "<=",  # less than or equal
    "≥": ">=",  # greater than or equal
    "≠": "!=",  # not equal
    "→": "->",  # right arrow
}

# Raw HTML in the model output is printed as text, not interpreted
_markdown = MarkdownIt("commonmark", {"html": False})

# markdown-it emits matched open/close pairs, so the tags always nest
_INLINE_TAGS = {
    "strong_open": "<b>",
    "strong_close": "</b>",
    "em_open": "<i>",
    "em_close": "</i>",
}


def _to_latin1(text: str) -> str:
    for char, replacement in _UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="ignore").decode("latin-1")


def _sanitize_text(text: str) -> str:
    """Replace characters Helvetica/latin-1 cannot encode; emoji are dropped."""
    if not text:
        return ""
    return _to_latin1(text).strip()


def _render_inline(children, softbreak: str = " ") -> str:
    """Turn an inline token's children into reportlab Paragraph markup."""
    parts = []
    for token in children or []:
        if token.type in _INLINE_TAGS:
            parts.append(_INLINE_TAGS[token.type])
        elif token.type in ("text", "html_inline", "image"):
            parts.append(xml_escape(_to_latin1(token.content)))
        elif token.type == "code_inline":
            parts.append(f'<font face="Courier">{xml_escape(_to_latin1(token.content))}</font>')
        elif token.type == "softbreak":
            parts.append(softbreak)
        elif token.type == "hardbreak":
            parts.append("<br/>")
        # link_open / link_close: keep the link text only
    return "".join(parts).strip()


def _inline_markup(text: str) -> str:
    """Escape one line of Markdown for Paragraph, with **bold** / *italic* as tags."""
    if not text:
        return ""
    [inline] = _markdown.parseInline(text)
    return _render_inline(inline.children)


class MarkdownPDFService:
    """Render worksheet Markdown into a printable A4 PDF."""

    def __init__(self, brand: str = "EduGenius AI"):
        self.brand = brand
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()
        self._page_count = 0

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='WorksheetTitle',
            fontName='Helvetica-Bold',
            fontSize=20,
            leading=24,
            spaceAfter=12,
            alignment=TA_CENTER,
            textColor=_PRIMARY,
        ))
        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            fontName='Helvetica-Bold',
            fontSize=13,
            leading=16,
            textColor=_PRIMARY,
            spaceBefore=10,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='SubHeader',
            fontName='Helvetica-Bold',
            fontSize=11,
            leading=14,
            spaceBefore=8,
            spaceAfter=4,
        ))
        self.styles.add(ParagraphStyle(
            name='Body',
            fontName='Helvetica',
            fontSize=10.5,
            leading=14,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='ListItem',
            fontName='Helvetica',
            fontSize=10.5,
            leading=15,
            leftIndent=22,
            firstLineIndent=-14,
            spaceAfter=8,
        ))
        self.styles.add(ParagraphStyle(
            name='Callout',
            fontName='Helvetica',
            fontSize=10,
            leading=14,
        ))

    def generate_pdf(self, title: str, markdown: str) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2.0 * cm,
            leftMargin=2.0 * cm,
            topMargin=2.0 * cm,
            bottomMargin=2.0 * cm,
            title=_sanitize_text(title),
        )
        self._page_count = 0

        story = self._build_story(markdown)
        if not story:
            story.append(Paragraph(_inline_markup(title), self.styles['WorksheetTitle']))

        doc.build(
            story,
            onFirstPage=self._draw_page_furniture,
            onLaterPages=self._draw_page_furniture,
        )
        buffer.seek(0)
        return buffer.getvalue()

    # ──────────────────────────────────────────
    # Page furniture (footer)
    # ──────────────────────────────────────────
    def _draw_page_furniture(self, canvas, doc):
        canvas.saveState()
        page_width, _ = A4
        self._page_count += 1
        y_footer = 1.0 * cm

        canvas.setFont('Helvetica', 7)
        canvas.setFillColor(_MUTED)
        canvas.drawString(2.0 * cm, y_footer, self.brand)
        canvas.drawRightString(page_width - 2.0 * cm, y_footer, f"Página {self._page_count}")

        canvas.setStrokeColor(_RULE)
        canvas.setLineWidth(0.5)
        canvas.line(2.0 * cm, y_footer + 10, page_width - 2.0 * cm, y_footer + 10)
        canvas.restoreState()

    # ──────────────────────────────────────────
    # Markdown → flowables
    # ──────────────────────────────────────────
    def _build_story(self, markdown: str) -> list:
        story = []
        callout: list[str] = []
        quote_depth = 0
        heading_style = None
        # one [ordered, next_number] entry per open list
        lists: list[list] = []
        item_marker = None

        for token in _markdown.parse(markdown or ""):
            kind = token.type

            if kind == "heading_open":
                level = int(token.tag[1:])
                heading_style = {1: 'WorksheetTitle', 2: 'SectionHeader'}.get(level, 'SubHeader')
            elif kind == "heading_close":
                heading_style = None

            elif kind == "blockquote_open":
                quote_depth += 1
            elif kind == "blockquote_close":
                quote_depth -= 1
                if quote_depth == 0 and callout:
                    story.append(self._build_callout(callout))
                    callout = []

            elif kind in ("ordered_list_open", "bullet_list_open"):
                start = token.attrGet("start")
                lists.append([kind == "ordered_list_open", int(start) if start else 1])
            elif kind in ("ordered_list_close", "bullet_list_close"):
                lists.pop()
            elif kind == "list_item_open":
                ordered, number = lists[-1]
                if ordered:
                    item_marker = f"<b>{number}.</b> "
                    lists[-1][1] = number + 1
                else:
                    item_marker = "&bull; "

            elif kind == "hr":
                story.append(HRFlowable(
                    width="100%", thickness=0.5, color=_RULE,
                    spaceBefore=6, spaceAfter=8,
                ))

            elif kind in ("fence", "code_block"):
                story.append(Preformatted(_to_latin1(token.content).rstrip("\n"), self.styles['Code']))

            elif kind == "inline":
                if quote_depth:
                    text = _render_inline(token.children, softbreak="<br/>")
                    if text:
                        callout.append(text)
                    continue

                text = _render_inline(token.children)
                if heading_style:
                    if text:
                        story.append(Paragraph(text, self.styles[heading_style]))
                elif lists:
                    marker, item_marker = item_marker or "", None
                    if text or marker:
                        story.append(Paragraph(f"{marker}{text}", self.styles['ListItem']))
                elif text:
                    story.append(Paragraph(text, self.styles['Body']))

        return story

    def _build_callout(self, lines: list[str]) -> Table:
        text = "<br/>".join(lines)
        page_width = A4[0] - 4.0 * cm
        box = Table([[Paragraph(text, self.styles['Callout'])]], colWidths=[page_width])
        box.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), _CALLOUT_BG),
            ('LINEBEFORE', (0, 0), (0, -1), 2, _PRIMARY),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('LEFTPADDING', (0, 0), (-1, -1), 10),
        ]))
        return box


def get_pdf_service() -> MarkdownPDFService:
    return MarkdownPDFService()
