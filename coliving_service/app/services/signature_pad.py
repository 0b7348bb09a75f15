import base64
import binascii
import re
from io import BytesIO
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

Point = Tuple[float, float]

PNG_DATA_URL_PREFIX = "data:image/png;base64,"
IMAGE_DATA_URL_PATTERN = re.compile(r"^data:image/[a-zA-Z+.-]+;base64,(.+)$", re.DOTALL)


def decode_image_data_url(data_url: Optional[str]) -> Optional[bytes]:
    """Raw bytes of a base64 image data URL, None when it is not a readable image."""
    match = IMAGE_DATA_URL_PATTERN.match(data_url or "")
    if not match:
        return None
    try:
        image_bytes = base64.b64decode(match.group(1), validate=True)
        Image.open(BytesIO(image_bytes)).verify()
    except (binascii.Error, OSError, ValueError):
        return None
    return image_bytes


def check_signature_image(value: Optional[str]) -> Optional[str]:
    if value is not None and decode_image_data_url(value) is None:
        raise ValueError("La signature doit être une image valide (data:image/...;base64)")
    return value


class SignaturePad:
    """
    Records pointer strokes and rasterizes them to a PNG.

    A stroke starts on pointer down, grows on every move while the
    pointer is held and ends on pointer up. Moves without a pressed
    pointer are ignored.
    """

    def __init__(self, width: int = 500, height: int = 200, line_width: int = 3,
                 stroke_color: str = "black", background: str = "white"):
        self.width = width
        self.height = height
        self.line_width = line_width
        self.stroke_color = stroke_color
        self.background = background
        self.strokes: List[List[Point]] = []
        self._current: Optional[List[Point]] = None

    def _clamp(self, x: float, y: float) -> Point:
        return (min(max(x, 0), self.width), min(max(y, 0), self.height))

    def pointer_down(self, x: float, y: float):
        self._current = [self._clamp(x, y)]
        self.strokes.append(self._current)

    def pointer_move(self, x: float, y: float):
        if self._current is None:
            return
        self._current.append(self._clamp(x, y))

    def pointer_up(self):
        self._current = None

    def clear(self):
        self.strokes = []
        self._current = None

    def is_empty(self) -> bool:
        return not any(self.strokes)

    def to_png(self) -> bytes:
        image = Image.new("RGB", (self.width, self.height), self.background)
        draw = ImageDraw.Draw(image)
        radius = self.line_width / 2

        for stroke in self.strokes:
            if len(stroke) == 1:
                x, y = stroke[0]
                draw.ellipse((x - radius, y - radius, x + radius, y + radius),
                             fill=self.stroke_color)
                continue
            draw.line(stroke, fill=self.stroke_color, width=self.line_width, joint="curve")

        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def to_data_url(self) -> Optional[str]:
        """PNG data URL of the drawing, None when nothing was drawn."""
        if self.is_empty():
            return None
        return PNG_DATA_URL_PREFIX + base64.b64encode(self.to_png()).decode("ascii")
