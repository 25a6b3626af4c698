"""
Page dimension and margin arithmetic.

Every length the print command receives is expressed in inches.
"""

import math
from dataclasses import dataclass

from pdfsmith.shared.errors import ConfigurationError

from .schemas import PrintOptions

# Divisors converting a unit to inches
UNIT_DIVISORS = {
    "mm": 25.4,
    "cm": 2.54,
    "in": 1.0,
}

# Paper sizes in inches (width, height)
PAGE_SIZES = {
    "A3": (11.69, 16.54),
    "A4": (8.27, 11.69),
    "A5": (5.83, 8.27),
    "Letter": (8.5, 11.0),
    "Legal": (8.5, 14.0),
    "Tabloid": (11.0, 17.0),
}

DEFAULT_PAGE_SIZE = "A4"


@dataclass(frozen=True)
class PageGeometry:
    """Paper size and margins in inches."""
    width: float
    height: float
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float


def parse_length(value: str) -> float:
    """
    Convert a length such as "10mm", "2.54cm" or "0.5in" to inches.

    Raises:
        ConfigurationError: unknown unit, non-numeric or negative value
    """
    text = (value or "").strip()
    unit = text[-2:].lower()
    divisor = UNIT_DIVISORS.get(unit)
    if divisor is None:
        raise ConfigurationError(f"invalid length unit: {value!r}")

    try:
        number = float(text[:-2])
    except ValueError as e:
        raise ConfigurationError(f"invalid length value: {value!r}") from e

    if not math.isfinite(number) or number < 0:
        raise ConfigurationError(f"length must be a non-negative number: {value!r}")

    return number / divisor


def page_dimensions(name: str | None) -> tuple[float, float]:
    """Look up a named paper size; unknown or empty names fall back to A4."""
    if name in PAGE_SIZES:
        return PAGE_SIZES[name]
    for known, dims in PAGE_SIZES.items():
        if name and known.lower() == name.lower():
            return dims
    return PAGE_SIZES[DEFAULT_PAGE_SIZE]


def _field(label: str, value: str) -> float:
    try:
        return parse_length(value)
    except ConfigurationError as e:
        raise ConfigurationError(
            f"invalid {label}: {e.message}",
            details={"field": label.replace(" ", "_"), "value": value},
        ) from e


def resolve_geometry(options: PrintOptions) -> PageGeometry:
    """Compute paper size and margins, validating every length up front."""
    margin_top = _field("margin top", options.margin_top)
    margin_bottom = _field("margin bottom", options.margin_bottom)
    margin_left = _field("margin left", options.margin_left)
    margin_right = _field("margin right", options.margin_right)

    if options.paper_width and options.paper_height:
        width = _field("paper width", options.paper_width)
        height = _field("paper height", options.paper_height)
    else:
        width, height = page_dimensions(options.page_size)

    return PageGeometry(
        width=width,
        height=height,
        margin_top=margin_top,
        margin_bottom=margin_bottom,
        margin_left=margin_left,
        margin_right=margin_right,
    )
