"""
Style Translation and Merging

Converts configuration style objects into openpyxl styles and applies them
to cells. Font and alignment are merged field by field with whatever the
cell already carries; fill and border are replaced as a whole.
"""
from __future__ import annotations

from typing import Any, Optional

from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Border, Color, Font, PatternFill, Side

from sheetgen_engine.models import (
    AlignmentSpec,
    BorderSpec,
    CellStyle,
    ColorSpec,
    FillSpec,
    FontSpec,
    normalize_argb,
)


FONT_FIELDS = (
    "name", "size", "bold", "italic", "underline", "strike", "color",
    "vertAlign", "charset", "family", "scheme", "outline", "shadow",
    "condense", "extend",
)

ALIGNMENT_FIELDS = (
    "horizontal", "vertical", "text_rotation", "wrap_text", "shrink_to_fit",
    "indent", "relativeIndent", "justifyLastLine", "readingOrder",
)

BORDER_SIDES = ("top", "left", "bottom", "right", "diagonal")


# ============================================================================
# TRANSLATION
# ============================================================================

def to_color(spec: Optional[ColorSpec]) -> Optional[Color]:
    if spec is None:
        return None
    if spec.argb is not None:
        return Color(rgb=spec.argb)
    if spec.theme is not None:
        return Color(theme=spec.theme)
    return None


def argb_color(argb: str) -> Color:
    return Color(rgb=normalize_argb(argb))


def _underline(value: bool | str) -> Optional[str]:
    if value is True:
        return "single"
    if value is False:
        return None
    return value


def font_kwargs(spec: FontSpec) -> dict[str, Any]:
    """Keyword arguments for Font() holding only the fields set on ``spec``."""
    kwargs: dict[str, Any] = {}
    for name in ("name", "size", "bold", "italic", "strike"):
        value = getattr(spec, name)
        if value is not None:
            kwargs[name] = value
    if spec.underline is not None:
        kwargs["underline"] = _underline(spec.underline)
    if spec.color is not None:
        kwargs["color"] = to_color(spec.color)
    return kwargs


def alignment_kwargs(spec: AlignmentSpec) -> dict[str, Any]:
    return {
        name: getattr(spec, name)
        for name in ("horizontal", "vertical", "wrap_text", "shrink_to_fit", "indent", "text_rotation")
        if getattr(spec, name) is not None
    }


def build_font(spec: Optional[FontSpec]) -> Font:
    """Font carrying exactly the fields of ``spec`` (full overwrite)."""
    return Font(**font_kwargs(spec)) if spec is not None else Font()


def build_alignment(spec: Optional[AlignmentSpec]) -> Alignment:
    return Alignment(**alignment_kwargs(spec)) if spec is not None else Alignment()


def build_fill(spec: FillSpec) -> PatternFill:
    kwargs: dict[str, Any] = {"fill_type": spec.pattern}
    fg = to_color(spec.fg_color)
    bg = to_color(spec.bg_color)
    if fg is not None:
        kwargs["fgColor"] = fg
    if bg is not None:
        kwargs["bgColor"] = bg
    return PatternFill(**kwargs)


def solid_fill(argb: str) -> PatternFill:
    color = normalize_argb(argb)
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def build_border(spec: BorderSpec) -> Border:
    sides: dict[str, Side] = {}
    for name in BORDER_SIDES:
        side = getattr(spec, name)
        if side is None:
            continue
        color = to_color(side.color)
        sides[name] = Side(style=side.style, color=color) if color is not None else Side(style=side.style)
    return Border(**sides)


def uniform_border(color: str, style: str) -> Border:
    """Same side on all four edges; 6-digit colors get an opaque alpha."""
    side = Side(style=style, color=argb_color(color))
    return Border(left=side, right=side, top=side, bottom=side)


# ============================================================================
# MERGING
# ============================================================================

def merge_font(existing: Font, incoming: dict[str, Any]) -> Font:
    """Existing font fields with ``incoming`` fields layered on top."""
    merged = {name: getattr(existing, name) for name in FONT_FIELDS}
    merged.update(incoming)
    return Font(**merged)


def merge_alignment(existing: Alignment, incoming: dict[str, Any]) -> Alignment:
    merged = {name: getattr(existing, name) for name in ALIGNMENT_FIELDS}
    merged.update(incoming)
    return Alignment(**merged)


def apply_cell_style(cell: Cell, style: CellStyle) -> None:
    """
    Apply the row-style merge rule to one cell.

    font/alignment: merged, incoming wins on conflict
    fill/border:    replaced
    num_fmt:        set
    """
    if style.font is not None:
        cell.font = merge_font(cell.font, font_kwargs(style.font))
    if style.alignment is not None:
        cell.alignment = merge_alignment(cell.alignment, alignment_kwargs(style.alignment))
    if style.fill is not None:
        cell.fill = build_fill(style.fill)
    if style.border is not None:
        cell.border = build_border(style.border)
    if style.num_fmt is not None:
        cell.number_format = style.num_fmt
