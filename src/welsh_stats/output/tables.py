"""Plain-text tables for measures, areas, and area collections.

The output is a report for people to read; nothing parses it back.
"""

from ..data.models import Area, Areas, Measure
from .utils import align_row, column_widths, format_value

SUMMARY_HEADERS = ("Average", "Diff.", "% Diff.")


def render_measure(measure: Measure) -> str:
    """Render a measure as a title line, a year header row, and a value row."""
    title = f"{measure.label} ({measure.codename})"
    years = measure.years
    if not years:
        return f"{title}\n<no data>"
    header = [str(year) for year in years] + list(SUMMARY_HEADERS)
    values = [format_value(value) for value in years.values()]
    values += [
        format_value(measure.get_average()),
        format_value(measure.get_difference()),
        format_value(measure.get_difference_as_percentage()),
    ]
    widths = column_widths(header, values)
    return "\n".join([title, align_row(header, widths), align_row(values, widths)])


def display_name(area: Area) -> str:
    """Pick the heading name for an area from its English and Welsh names."""
    names = area.names
    if "eng" in names and "cym" in names:
        return f"{names['eng']} / {names['cym']}"
    for lang in ("eng", "cym"):
        if lang in names:
            return names[lang]
    if len(names) == 1:
        return next(iter(names.values()))
    return "Unnamed"


def render_area(area: Area) -> str:
    """Render an area heading followed by its measures in codename order."""
    heading = f"{display_name(area)} ({area.code})"
    measures = area.measures
    if not measures:
        return f"{heading}\n<no measures>\n"
    body = "\n\n".join(render_measure(measure) for measure in measures.values())
    return f"{heading}\n{body}\n"


def render_areas(areas: Areas) -> str:
    """Render every area in code order, each followed by a blank line."""
    return "".join(f"{render_area(area)}\n" for area in areas)


__all__ = ["SUMMARY_HEADERS", "display_name", "render_area", "render_areas", "render_measure"]
