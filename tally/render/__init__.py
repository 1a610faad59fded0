"""Report output renderers."""

from tally.render.document import render_document

__all__ = ["render_document"]
