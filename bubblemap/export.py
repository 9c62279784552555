"""Export functionality for BubbleMap diagrams."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import cairo

from bubblemap.config import get_data_dir
from bubblemap.render import BubbleRenderer
from bubblemap.simulation import SimulationSnapshot

logger = logging.getLogger(__name__)


class DiagramExporter:
    """Writes a snapshot of the diagram to image files."""

    PAGE_SIZES = {
        "A4": (595, 842),
        "Letter": (612, 792),
    }

    def __init__(self, renderer: Optional[BubbleRenderer] = None):
        self.renderer = renderer or BubbleRenderer(animate_edges=False)

    def export_png(self, snapshot: SimulationSnapshot, filepath: str,
                   scale: float = 1.0, transparent: bool = False) -> bool:
        """Export the canvas area to a PNG image.

        The image covers the full bounds so it matches what was on screen.
        """
        if snapshot.is_empty:
            return False

        width = max(1, int(snapshot.width * scale))
        height = max(1, int(snapshot.height * scale))

        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, width, height)
        cr = cairo.Context(surface)
        cr.scale(scale, scale)
        self.renderer.draw(cr, snapshot, now_ms=0, background=not transparent)

        surface.write_to_png(str(filepath))
        logger.info("Exported %d bubbles to %s", len(snapshot.nodes), filepath)
        return True

    def export_pdf(self, snapshot: SimulationSnapshot, filepath: str,
                   page_size: str = "Auto", title: str = "BubbleMap") -> bool:
        """Export to PDF, either at canvas size ("Auto") or fitted to a page."""
        if snapshot.is_empty:
            return False

        if page_size == "Auto":
            width, height = snapshot.width, snapshot.height
            scale = 1.0
        else:
            width, height = self.PAGE_SIZES.get(page_size, self.PAGE_SIZES["A4"])
            scale = min((width - 40) / snapshot.width, (height - 40) / snapshot.height, 1.0)

        surface = cairo.PDFSurface(str(filepath), width, height)
        surface.set_metadata(cairo.PDF_METADATA_TITLE, title)
        surface.set_metadata(cairo.PDF_METADATA_CREATE_DATE,
                             datetime.now().isoformat())
        cr = cairo.Context(surface)

        if page_size != "Auto":
            cr.translate(width / 2, height / 2)
            cr.scale(scale, scale)
            cr.translate(-snapshot.width / 2, -snapshot.height / 2)

        self.renderer.draw(cr, snapshot, now_ms=0)
        surface.finish()
        logger.info("Exported %d bubbles to %s", len(snapshot.nodes), filepath)
        return True


def get_export_dir() -> Path:
    """Get the default export directory."""
    export_dir = get_data_dir() / "exports"
    export_dir.mkdir(exist_ok=True)
    return export_dir
