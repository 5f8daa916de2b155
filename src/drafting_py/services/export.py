"""Export service for drawing serialization and rendering."""

from __future__ import annotations

import io
import json
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from PIL import Image, ImageDraw

from drafting_py.core.models import Arc, Circle, Line, Rectangle, Shape, shape_from_dict
from drafting_py.exceptions import InvalidSnapshotError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = structlog.get_logger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600


@dataclass
class Drawing:
    """A named drawing document.

    Attributes:
        shapes: Shapes in drawing order.
        name: Document title.
        width: Page width in world units.
        height: Page height in world units.
    """

    shapes: list[Shape] = field(default_factory=list)
    name: str = "Untitled"
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT


class ExportService:
    """Service for exporting drawings to various formats.

    Supports exporting to:
    - JSON: Drawing document with every shape
    - SVG: One path element per shape
    - PNG: Raster preview
    """

    def to_dict(self, drawing: Drawing) -> dict[str, Any]:
        """Export a drawing to a dictionary.

        Args:
            drawing: The drawing to export.

        Returns:
            Dictionary representation of the drawing.
        """
        return {
            "name": drawing.name,
            "width": drawing.width,
            "height": drawing.height,
            "shapes": [shape.to_dict() for shape in drawing.shapes],
        }

    def to_json(self, drawing: Drawing, *, indent: int | None = 2) -> str:
        """Export a drawing to JSON format.

        Args:
            drawing: The drawing to export.
            indent: JSON indentation level (None for compact).

        Returns:
            JSON string representation of the drawing.
        """
        return json.dumps(self.to_dict(drawing), indent=indent)

    def load_dict(self, data: Mapping[str, Any]) -> Drawing:
        """Rebuild a drawing from :meth:`to_dict` output.

        A bare list of shape dictionaries is accepted as well.

        Raises:
            InvalidSnapshotError: If the payload or any shape in it is malformed.
        """
        if isinstance(data, list):
            data = {"shapes": data}
        if not isinstance(data, dict):
            msg = f"Drawing payload must be an object, got {type(data).__name__}"
            raise InvalidSnapshotError(msg)

        raw_shapes = data.get("shapes", [])
        if not isinstance(raw_shapes, list):
            msg = "Drawing 'shapes' must be a list"
            raise InvalidSnapshotError(msg)

        try:
            drawing = Drawing(
                shapes=[shape_from_dict(item) for item in raw_shapes],
                name=str(data.get("name", "Untitled")),
                width=int(data.get("width", DEFAULT_WIDTH)),
                height=int(data.get("height", DEFAULT_HEIGHT)),
            )
        except (TypeError, ValueError) as e:
            msg = f"Malformed drawing header: {e}"
            raise InvalidSnapshotError(msg) from e
        logger.debug("Drawing loaded", name=drawing.name, shape_count=len(drawing.shapes))
        return drawing

    def load_json(self, text: str | bytes) -> Drawing:
        """Rebuild a drawing from :meth:`to_json` output.

        Raises:
            InvalidSnapshotError: If the text is not valid JSON or not a drawing.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            msg = f"Drawing is not valid JSON: {e.msg}"
            raise InvalidSnapshotError(msg) from e
        except UnicodeDecodeError as e:
            msg = f"Drawing is not valid text: {e.reason}"
            raise InvalidSnapshotError(msg) from e
        return self.load_dict(data)

    def path_data(self, shape: Shape) -> str:
        """Return the SVG path description of a shape."""
        return shape.to_path_data()

    def to_svg(
        self,
        drawing: Drawing,
        *,
        stroke_color: str = "#000000",
        stroke_width: float = 1,
        background_color: str = "#ffffff",
    ) -> str:
        """Export a drawing to SVG format.

        Args:
            drawing: The drawing to export.
            stroke_color: Outline color of every shape.
            stroke_width: Outline width of every shape.
            background_color: Page fill color.

        Returns:
            SVG string representation of the drawing.
        """
        svg_elements = [self._shape_to_svg(shape, stroke_color, stroke_width) for shape in drawing.shapes]

        return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg"
     width="{drawing.width}"
     height="{drawing.height}"
     viewBox="0 0 {drawing.width} {drawing.height}">
  <title>{self._escape_xml(drawing.name)}</title>
  <rect width="100%" height="100%" fill="{background_color}"/>
{chr(10).join(svg_elements)}
</svg>"""

    def to_png(
        self,
        drawing: Drawing,
        *,
        scale: float = 1.0,
        stroke_color: str = "#000000",
        stroke_width: float = 1,
        background_color: str = "#ffffff",
    ) -> bytes:
        """Export a drawing to PNG format using Pillow.

        Args:
            drawing: The drawing to export.
            scale: Scale factor for the output image.
            stroke_color: Outline color of every shape.
            stroke_width: Outline width of every shape.
            background_color: Page fill color.

        Returns:
            PNG image as bytes.
        """
        width = max(1, int(drawing.width * scale))
        height = max(1, int(drawing.height * scale))

        image = Image.new("RGBA", (width, height), self._parse_color(background_color))
        draw = ImageDraw.Draw(image)

        outline = self._parse_color(stroke_color)
        line_width = max(1, int(stroke_width * scale))
        for shape in drawing.shapes:
            self._draw_shape(draw, shape, scale, outline, line_width)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def _parse_color(self, color: str | None) -> tuple[int, int, int, int]:
        """Parse hex color string to RGBA tuple."""
        if not color:
            return (0, 0, 0, 255)
        color = color.lstrip("#")
        if len(color) == 6:
            r, g, b = int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)
            return (r, g, b, 255)
        if len(color) == 8:
            r, g, b, a = int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16), int(color[6:8], 16)
            return (r, g, b, a)
        return (0, 0, 0, 255)

    def _draw_shape(
        self,
        draw: ImageDraw.ImageDraw,
        shape: Shape,
        scale: float,
        outline: tuple[int, int, int, int],
        width: int,
    ) -> None:
        """Draw a shape onto the image."""
        if isinstance(shape, Line):
            draw.line(
                [(shape.x1 * scale, shape.y1 * scale), (shape.x2 * scale, shape.y2 * scale)],
                fill=outline,
                width=width,
            )
        elif isinstance(shape, Rectangle):
            x, y = shape.x * scale, shape.y * scale
            draw.rectangle([x, y, x + shape.width * scale, y + shape.height * scale], outline=outline, width=width)
        elif isinstance(shape, Circle | Arc):
            box = [
                (shape.cx - shape.radius) * scale,
                (shape.cy - shape.radius) * scale,
                (shape.cx + shape.radius) * scale,
                (shape.cy + shape.radius) * scale,
            ]
            if isinstance(shape, Circle):
                draw.ellipse(box, outline=outline, width=width)
            else:
                # Pillow measures degrees clockwise from 3 o'clock, matching y-down drawing space
                start = math.degrees(shape.start_angle)
                draw.arc(box, start, start + shape.angle_span_degrees, fill=outline, width=width)

    def _shape_to_svg(self, shape: Shape, stroke_color: str, stroke_width: float) -> str:
        """Convert a shape to an SVG path element."""
        return (
            f'  <path d="{self.path_data(shape)}" '
            f'data-id="{self._escape_xml(shape.id)}" '
            f'data-type="{shape.shape_type.value}" '
            f'stroke="{stroke_color}" '
            f'stroke-width="{stroke_width}" '
            f'fill="none"/>'
        )

    def _escape_xml(self, text: str) -> str:
        """Escape special XML characters."""
        return (
            text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&apos;")
        )


def drawing_from_shapes(shapes: Iterable[Shape], **kwargs: Any) -> Drawing:
    """Build a drawing document from shapes, copying each."""
    return Drawing(shapes=[shape.copy() for shape in shapes], **kwargs)
