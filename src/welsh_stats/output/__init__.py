"""Human-readable rendering for imported statistics."""

from .tables import render_area, render_areas, render_measure

__all__ = ["render_area", "render_areas", "render_measure"]
