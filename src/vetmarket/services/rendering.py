"""
Document rendering for certificates and other template-driven documents.

A ``DocumentTemplate`` supplies the layout (title, orientation and the
ordered list of fields to print) and the branding (logo and colours); the
caller supplies the data payload. PDF output is built with reportlab, HTML
output is plain escaped markup.
"""

import html
import io
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    NotFoundException,
    RenderingException,
    UnsupportedFormatException,
    ValidationException,
)
from ..models.template import DocumentTemplate
from ..utils.datetime_utils import get_current_utc

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("pdf", "html")

DEFAULT_PRIMARY_COLOR = "#1e3a5f"
DEFAULT_SECONDARY_COLOR = "#f1f5f9"

RenderedDocument = Union[bytes, str]


def resolve_field(data: Dict[str, Any], key: str) -> Any:
    """
    Look up a dotted key (``provider.name``) in a nested payload.

    Returns None when any segment is missing.
    """
    value: Any = data
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def format_value(value: Any) -> str:
    """Render a payload value as display text."""
    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(item) for item in value) or "N/A"
    if isinstance(value, dict):
        return ", ".join(f"{k}: {format_value(v)}" for k, v in value.items())
    return str(value)


def collect_rows(data: Dict[str, Any], layout: Dict[str, Any]) -> List[Tuple[str, str]]:
    """
    Build the ``(label, value)`` rows a document prints.

    ``layout["fields"]`` may list plain keys or ``{"key", "label"}`` objects;
    without it every top-level payload key is printed in order.
    """
    fields = layout.get("fields")
    if not fields:
        return [
            (key.replace("_", " ").title(), format_value(value))
            for key, value in data.items()
        ]

    rows = []
    for field in fields:
        if isinstance(field, dict):
            key = str(field.get("key", ""))
            label = str(field.get("label") or key)
        else:
            key = label = str(field)
        rows.append((label, format_value(resolve_field(data, key))))
    return rows


def missing_required_fields(data: Dict[str, Any], template: DocumentTemplate) -> List[str]:
    """Keys from ``template.required_fields`` the payload has no value for."""
    return [
        key for key in template.required_fields or [] if resolve_field(data, key) in (None, "")
    ]


def _branding_colors(branding: Dict[str, Any]) -> Tuple[str, str]:
    primary = branding.get("primaryColor") or DEFAULT_PRIMARY_COLOR
    secondary = branding.get("secondaryColor") or DEFAULT_SECONDARY_COLOR
    return primary, secondary


def _render_pdf(
    data: Dict[str, Any], template: DocumentTemplate, layout: Dict[str, Any], branding: Dict[str, Any]
) -> bytes:
    primary, secondary = _branding_colors(branding)
    brand_color = colors.HexColor(primary)
    dark_gray = colors.HexColor("#1e293b")

    pagesize = landscape(letter) if layout.get("orientation") == "landscape" else letter
    title = str(layout.get("title") or template.name)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "DocumentTitle",
        parent=styles["Heading1"],
        fontSize=22,
        textColor=brand_color,
        spaceAfter=12,
        alignment=1,
    )
    body_style = ParagraphStyle(
        "DocumentBody",
        parent=styles["Normal"],
        fontSize=10,
        textColor=dark_gray,
        spaceAfter=6,
    )

    story: List[Any] = []

    story.append(Paragraph(html.escape(title), title_style))
    if layout.get("subtitle"):
        story.append(Paragraph(html.escape(str(layout["subtitle"])), body_style))
    story.append(Spacer(1, 0.3 * inch))

    rows = [
        [Paragraph(f"<b>{html.escape(label)}</b>", body_style), Paragraph(html.escape(value), body_style)]
        for label, value in collect_rows(data, layout)
    ]
    if rows:
        table = Table(rows, colWidths=[2.0 * inch, 4.5 * inch])
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("ROWBACKGROUNDS", (0, 0), (-1, -1), [colors.white, colors.HexColor(secondary)]),
                    ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.grey),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        story.append(table)

    footer = layout.get("footer") or f"Issued {get_current_utc().strftime('%B %d, %Y')}"
    story.append(Spacer(1, 0.5 * inch))
    story.append(
        Paragraph(
            f"<i>{html.escape(str(footer))}</i>",
            ParagraphStyle("Footer", parent=body_style, fontSize=8, textColor=colors.grey, alignment=1),
        )
    )

    doc.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes


def _render_html(
    data: Dict[str, Any], template: DocumentTemplate, layout: Dict[str, Any], branding: Dict[str, Any]
) -> str:
    primary, secondary = _branding_colors(branding)
    title = html.escape(str(layout.get("title") or template.name))

    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{title}</title>",
        "<style>",
        f"h1 {{ color: {html.escape(primary)}; }}",
        f"tr:nth-child(even) {{ background: {html.escape(secondary)}; }}",
        "</style>",
        "</head>",
        "<body>",
    ]
    if branding.get("logoUrl"):
        parts.append(f'<img class="logo" src="{html.escape(str(branding["logoUrl"]))}" alt="logo">')
    parts.append(f"<h1>{title}</h1>")
    if layout.get("subtitle"):
        parts.append(f"<p>{html.escape(str(layout['subtitle']))}</p>")

    parts.append("<table>")
    for label, value in collect_rows(data, layout):
        parts.append(f"<tr><th>{html.escape(label)}</th><td>{html.escape(value)}</td></tr>")
    parts.append("</table>")

    if layout.get("footer"):
        parts.append(f"<footer>{html.escape(str(layout['footer']))}</footer>")
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts)


def render_template(
    data: Dict[str, Any], template: DocumentTemplate, format: str = "pdf"
) -> RenderedDocument:
    """
    Render a data payload into a document using a template.

    Args:
        data: Values to print, looked up by the layout's field keys
        template: Template providing layout configuration and branding
        format: ``pdf`` or ``html`` (case-insensitive)

    Returns:
        PDF bytes, or an HTML string

    Raises:
        UnsupportedFormatException: If the format is neither pdf nor html
        ValidationException: If the payload lacks one of the template's
            required fields
        RenderingException: If the document cannot be produced
    """
    requested = (format or "").lower()
    if requested not in SUPPORTED_FORMATS:
        raise UnsupportedFormatException(format)

    missing = missing_required_fields(data, template)
    if missing:
        raise ValidationException(
            f"Missing required fields: {', '.join(missing)}",
            field="data",
            validation_errors={"missing": missing},
        )

    logger.info(f"Rendering template {template.name} to format {requested}")

    layout = template.layout_configuration or {}
    branding = template.branding_options or {}
    try:
        if requested == "pdf":
            return _render_pdf(data, template, layout, branding)
        return _render_html(data, template, layout, branding)
    except Exception as e:
        logger.error(f"Failed to render template {template.name} to format {requested}: {e}")
        raise RenderingException(
            f"Failed to render template {template.name}.",
            template_name=template.name,
            original_error=e,
        ) from e


async def find_template(
    session: AsyncSession, template_id: Optional[uuid.UUID] = None
) -> DocumentTemplate:
    """
    Pick the template to render with.

    Args:
        session: Database session
        template_id: Explicit template to use

    Returns:
        The requested template, else the default one, else any template

    Raises:
        NotFoundException: If ``template_id`` does not exist
        RenderingException: If no template exists at all
    """
    if template_id is not None:
        template = await session.get(DocumentTemplate, template_id)
        if template is None:
            raise NotFoundException(
                f"Document template with ID {template_id} not found.",
                resource="DocumentTemplate",
                resource_id=template_id,
            )
        return template

    result = await session.execute(
        select(DocumentTemplate)
        .where(DocumentTemplate.is_default.is_(True))
        .order_by(DocumentTemplate.created_at)
        .limit(1)
    )
    template = result.scalar_one_or_none()
    if template is not None:
        return template

    result = await session.execute(
        select(DocumentTemplate).order_by(DocumentTemplate.created_at).limit(1)
    )
    template = result.scalar_one_or_none()
    if template is None:
        raise RenderingException("No default or fallback document template found.")

    logger.warning(f"No default template found, using {template.name}")
    return template
