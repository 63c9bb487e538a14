"""Tray icon rendering for Nightscout Tray.

Handles the 16x16 text icons (glucose value, delta, delta operator) and
the direction arrow icons shown on platforms whose tray cannot show text.

Usage:
    from app.views.icons import IconRenderer, DirectionIconSet

    renderer = IconRenderer()
    renderer.render("120", icon_dir / "glucose.png")
    arrow_path = DirectionIconSet().icon_path("FortyFiveUp")
"""
import math
import tempfile
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from config import ASSETS, COLORS, STORAGE, UI, RenderError, get_logger
from nightscout.directions import NONE_CODE, get_direction, is_known_direction

logger = get_logger(__name__)

Font = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]

ICON_OPERATORS = ("-", "+")


def sanitize_icon_text(text: str) -> str:
    """Prepare text for a 16x16 icon.

    Removes the "+" and "-" operators (they get their own icon) and
    swaps the decimal point for a comma, which reads better at this size.
    """
    text = text or ""
    for op in ICON_OPERATORS:
        text = text.replace(op, "")
    return text.replace(".", ",")


class IconRenderer:
    """Rasterizes short strings into fixed-size tray icons.

    The font is loaded lazily on first use and cached. Scalable fonts are
    shrunk until the text fits the canvas; bitmap fonts are drawn as-is.
    """

    def __init__(self, font_path: Optional[Path] = None, size: int = UI.ICON_SIZE):
        self.font_path = font_path
        self.size = size
        self._font: Optional[Font] = None
        self._variants: Dict[int, Font] = {}

    def _load_font(self) -> Font:
        if self._font is not None:
            return self._font

        try:
            if self.font_path is None:
                font = ImageFont.load_default(size=UI.FONT_SIZE)
            elif self.font_path.suffix.lower() in (".ttf", ".otf"):
                font = ImageFont.truetype(str(self.font_path), UI.FONT_SIZE)
            else:
                font = ImageFont.load(str(self.font_path))
        except OSError as e:
            raise RenderError(f"Could not load font: {e}", {"path": str(self.font_path)}) from e

        self._font = font
        logger.debug(f"Icon font loaded: {self.font_path or 'Pillow default'}")
        return font

    def _measure(self, text: str, font: Font) -> Tuple[int, int, int, int]:
        draw = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
        return draw.textbbox((0, 0), text, font=font)

    def _font_at(self, font_size: int) -> Font:
        """Return the loaded font at font_size; one variant is kept per size."""
        font = self._load_font()
        if not isinstance(font, ImageFont.FreeTypeFont) or font_size == int(font.size):
            return font
        if font_size not in self._variants:
            self._variants[font_size] = font.font_variant(size=font_size)
        return self._variants[font_size]

    def _fit_font(self, text: str) -> Font:
        """Pick the largest font variant whose rendering of text fits the canvas."""
        font = self._load_font()
        if not isinstance(font, ImageFont.FreeTypeFont):
            return font

        font_size = int(font.size)
        while font_size > UI.MIN_FONT_SIZE:
            font = self._font_at(font_size)
            left, top, right, bottom = self._measure(text, font)
            if right - left <= self.size and bottom - top <= self.size:
                return font
            font_size -= 1
        return self._font_at(UI.MIN_FONT_SIZE)

    def text_bbox(self, text: str) -> Tuple[int, int, int, int]:
        """Return the (left, top, right, bottom) box text occupies on the canvas."""
        font = self._fit_font(text)
        left, top, right, bottom = self._measure(text, font)
        width, height = right - left, bottom - top

        # Center inside the text box, then keep the glyphs on the canvas
        x = UI.TEXT_OFFSET_X + (UI.TEXT_BOX_WIDTH - width) // 2
        y = UI.TEXT_OFFSET_Y + (UI.TEXT_BOX_HEIGHT - height) // 2
        x = max(0, min(x, self.size - width))
        y = max(0, min(y, self.size - height))
        return x, y, x + width, y + height

    def draw(self, text: str) -> Image.Image:
        """Draw text onto a fresh opaque icon canvas."""
        img = Image.new("RGBA", (self.size, self.size), COLORS.ICON_BACKGROUND_RGBA)
        if not text:
            return img

        try:
            font = self._fit_font(text)
            left, top, _, _ = self._measure(text, font)
            x, y, _, _ = self.text_bbox(text)
            ImageDraw.Draw(img).text(
                (x - left, y - top), text, font=font, fill=COLORS.ICON_TEXT_RGBA
            )
        except RenderError:
            raise
        except (OSError, ValueError) as e:
            raise RenderError(f"Could not draw icon text: {e}", {"text": text}) from e
        return img

    def write(self, img: Image.Image, target_path: Path) -> None:
        """Write an icon, replacing target_path atomically."""
        target_path = Path(target_path)
        tmp_path = target_path.with_name(f".{target_path.name}.tmp")
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            img.save(tmp_path, "PNG", optimize=True)
            tmp_path.replace(target_path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise RenderError(f"Could not write icon: {e}", {"path": str(target_path)}) from e

    def render(self, text: str, target_path: Path) -> bool:
        """Render text into an icon file.

        Args:
            text: Text to draw; operators are stripped.
            target_path: PNG file to create or overwrite.

        Returns:
            True on success. On failure the error is logged and the
            previous file at target_path is left in place.
        """
        return self._render(sanitize_icon_text(text), target_path)

    def render_operator(self, operator: str, target_path: Path) -> bool:
        """Render a bare "+" or "-" into its own icon."""
        return self._render(operator, target_path)

    def _render(self, text: str, target_path: Path) -> bool:
        try:
            self.write(self.draw(text), target_path)
        except RenderError as e:
            logger.error(f"Icon render failed: {e}")
            return False
        logger.debug(f"Rendered icon {Path(target_path).name}: {text!r}")
        return True


def _rotate(vx: float, vy: float, degrees: float) -> Tuple[float, float]:
    rad = math.radians(degrees)
    return (vx * math.cos(rad) - vy * math.sin(rad),
            vx * math.sin(rad) + vy * math.cos(rad))


def draw_arrow_icon(code: str, color: Tuple[int, int, int, int],
                    size: int = UI.ICON_SIZE) -> Image.Image:
    """Draw the arrow icon for a direction code on a transparent canvas.

    Args:
        code: Direction code, e.g. "DoubleDown".
        color: RGBA fill color.
        size: Icon size in pixels.

    Returns:
        The drawn image.
    """
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    direction = get_direction(code)
    center = (size - 1) / 2

    if direction.angle is None:
        if direction.code == "NOT COMPUTABLE":
            draw.line([(center - 3, center), (center + 3, center)],
                      fill=color, width=UI.ARROW_LINE_WIDTH)
        elif direction.code == "RATE OUT OF RANGE":
            top, bottom = 2, size - 3
            head = UI.ARROW_HEAD_SIZE
            draw.line([(center, top), (center, bottom)], fill=color, width=UI.ARROW_LINE_WIDTH)
            draw.polygon([(center, top), (center - head, top + head), (center + head, top + head)],
                         fill=color)
            draw.polygon([(center, bottom), (center - head, bottom - head),
                          (center + head, bottom - head)], fill=color)
        return img

    # Unit vector in image coordinates (y grows downwards)
    vx = math.cos(math.radians(direction.angle))
    vy = -math.sin(math.radians(direction.angle))
    px, py = -vy, vx
    half = (size - 4) / 2
    head = UI.ARROW_HEAD_SIZE
    spacing = 4

    for i in range(direction.count):
        offset = (i - (direction.count - 1) / 2) * spacing
        cx, cy = center + px * offset, center + py * offset
        start = (cx - vx * half, cy - vy * half)
        tip = (cx + vx * half, cy + vy * half)
        draw.line([start, tip], fill=color, width=UI.ARROW_LINE_WIDTH)

        left = _rotate(-vx, -vy, 35)
        right = _rotate(-vx, -vy, -35)
        draw.polygon([
            tip,
            (tip[0] + left[0] * head, tip[1] + left[1] * head),
            (tip[0] + right[0] * head, tip[1] + right[1] * head),
        ], fill=color)

    return img


def arrow_filename(code: str, variant: str) -> str:
    return ASSETS.ARROW_FILE_PATTERN.format(code=code, variant=variant)


class DirectionIconSet:
    """Resolves direction codes to arrow icon files.

    Prefers the bundled assets; when an asset is missing an equivalent
    arrow is drawn into a cache directory once and reused.
    """

    VARIANT_COLORS = {
        "white": COLORS.ARROW_WHITE_RGBA,
        "black": COLORS.ARROW_BLACK_RGBA,
    }

    def __init__(self, asset_dir: Optional[Path] = None,
                 variant: str = ASSETS.DEFAULT_ARROW_VARIANT,
                 cache_dir: Optional[Path] = None):
        self.asset_dir = asset_dir or ASSETS.arrow_dir
        self.variant = variant if variant in self.VARIANT_COLORS else ASSETS.DEFAULT_ARROW_VARIANT
        self._cache_dir = cache_dir or Path(tempfile.gettempdir()) / STORAGE.ARROW_CACHE_DIR
        self._cache: Dict[str, Path] = {}

    def icon_path(self, direction_code: str) -> Path:
        """Return the icon file for a direction code.

        Unknown codes resolve to the blank NONE icon.

        Raises:
            RenderError: If the asset is missing and cannot be generated.
        """
        code = direction_code if is_known_direction(direction_code) else NONE_CODE
        asset = self.asset_dir / arrow_filename(code, self.variant)
        if asset.exists():
            return asset

        if code in self._cache and self._cache[code].exists():
            return self._cache[code]

        path = self._cache_dir / arrow_filename(code, self.variant)
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            img = draw_arrow_icon(code, self.VARIANT_COLORS[self.variant])
            img.save(path, format="ICO", sizes=[(UI.ICON_SIZE, UI.ICON_SIZE)])
        except OSError as e:
            raise RenderError(f"Could not generate arrow icon: {e}", {"code": code}) from e

        logger.debug(f"Generated missing arrow asset for {code} at {path}")
        self._cache[code] = path
        return path
