"""Tray presentation for Nightscout Tray.

Two presenter variants share one contract, ``present(model)``:

- IconTrayPresenter: four tray icons (glucose, delta, operator, arrow),
  used where the tray can only show images (Windows, Linux).
- TextTrayPresenter: one status item whose title and tooltip carry the
  reading, used on macOS.

The variant is chosen once at startup by ``select_presenter``.
"""
import sys
from enum import Enum, auto
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from PIL import Image

from app.views.icons import DirectionIconSet, IconRenderer
from config import STORAGE, RenderError, UnsupportedPlatformError, get_logger
from nightscout.display import DisplayModel

logger = get_logger(__name__)


class PlatformKind(Enum):
    """How the running platform shows the reading."""
    ICONS = auto()
    TEXT = auto()


class RenderTarget(Enum):
    """Every tray affordance a refresh cycle can overwrite."""
    GLUCOSE_ICON = auto()
    DELTA_ICON = auto()
    OPERATOR_ICON = auto()
    DIRECTION_ICON = auto()
    TITLE_TEXT = auto()


ICON_FILES = {
    RenderTarget.GLUCOSE_ICON: STORAGE.GLUCOSE_ICON_FILE,
    RenderTarget.DELTA_ICON: STORAGE.DELTA_ICON_FILE,
    RenderTarget.OPERATOR_ICON: STORAGE.OPERATOR_ICON_FILE,
}

ICON_TARGETS = (
    RenderTarget.GLUCOSE_ICON,
    RenderTarget.DELTA_ICON,
    RenderTarget.OPERATOR_ICON,
    RenderTarget.DIRECTION_ICON,
)


def detect_platform_kind(platform: Optional[str] = None) -> PlatformKind:
    """Map a sys.platform string to a presentation kind.

    Raises:
        UnsupportedPlatformError: For platforms with no known tray.
    """
    platform = platform if platform is not None else sys.platform
    if platform == "darwin":
        return PlatformKind.TEXT
    if platform in ("win32", "cygwin") or platform.startswith(("linux", "freebsd")):
        return PlatformKind.ICONS
    raise UnsupportedPlatformError("No tray presentation for platform", {"platform": platform})


def resolve_platform_kind(platform: Optional[str] = None) -> PlatformKind:
    """Like detect_platform_kind, but fall back to TEXT for unknown platforms."""
    try:
        return detect_platform_kind(platform)
    except UnsupportedPlatformError as e:
        logger.warning(f"{e}; falling back to text presentation")
        return PlatformKind.TEXT


class TrayHandle(Protocol):
    """A single tray affordance the presenters can update."""

    def set_image(self, path: Path) -> None:
        ...

    def set_text(self, text: str) -> None:
        ...


class PystrayHandle:
    """Adapts a pystray.Icon to the TrayHandle protocol."""

    def __init__(self, icon):
        self.icon = icon

    def set_image(self, path: Path) -> None:
        # Load fully so the file can be overwritten by the next cycle
        with Image.open(path) as img:
            self.icon.icon = img.copy()

    def set_text(self, text: str) -> None:
        # pystray uses the title as the hover tooltip
        self.icon.title = text


class RumpsHandle:
    """Adapts a rumps.App status item to the TrayHandle protocol."""

    def __init__(self, app):
        self.app = app

    def set_image(self, path: Path) -> None:
        self.app.icon = str(path)

    def set_text(self, text: str) -> None:
        self.app.title = text
        self._set_tooltip(text)

    def _set_tooltip(self, text: str) -> None:
        # The NSStatusItem only exists once rumps.App.run() has started
        nsapp = getattr(self.app, "_nsapp", None)
        status_item = getattr(nsapp, "nsstatusitem", None)
        if status_item is not None:
            status_item.button().setToolTip_(text)


class TrayPresenter:
    """Base class for presenter variants."""

    kind: PlatformKind

    def present(self, model: DisplayModel) -> None:
        raise NotImplementedError


class TextTrayPresenter(TrayPresenter):
    """Shows the reading as the status item's title and tooltip."""

    kind = PlatformKind.TEXT

    def __init__(self, handle: TrayHandle):
        self.handle = handle

    def present(self, model: DisplayModel) -> None:
        self.handle.set_text(model.title)
        logger.debug(f"Title set to {model.title!r}")


class IconTrayPresenter(TrayPresenter):
    """Shows the reading as four 16x16 tray icons.

    Attributes:
        handles: One tray handle per icon target.
        icon_dir: Directory the rendered icons are written to.
    """

    kind = PlatformKind.ICONS

    def __init__(self, handles: Mapping[RenderTarget, TrayHandle],
                 renderer: IconRenderer, arrows: DirectionIconSet, icon_dir: Path):
        missing = [t.name for t in ICON_TARGETS if t not in handles]
        if missing:
            raise ValueError(f"Missing tray handles: {', '.join(missing)}")

        self.handles: Dict[RenderTarget, TrayHandle] = dict(handles)
        self.renderer = renderer
        self.arrows = arrows
        self.icon_dir = Path(icon_dir)

    def icon_path(self, target: RenderTarget) -> Path:
        return self.icon_dir / ICON_FILES[target]

    def present(self, model: DisplayModel) -> None:
        rendered = {
            RenderTarget.GLUCOSE_ICON: self.renderer.render(
                model.glucose_value, self.icon_path(RenderTarget.GLUCOSE_ICON)),
            RenderTarget.DELTA_ICON: self.renderer.render(
                model.delta_magnitude, self.icon_path(RenderTarget.DELTA_ICON)),
            RenderTarget.OPERATOR_ICON: self.renderer.render_operator(
                model.delta_operator, self.icon_path(RenderTarget.OPERATOR_ICON)),
        }

        for target, ok in rendered.items():
            if ok:
                self.handles[target].set_image(self.icon_path(target))

        # Hovering any of the icons shows the full reading
        for target in ICON_TARGETS:
            self.handles[target].set_text(model.title)

        try:
            arrow = self.arrows.icon_path(model.direction_code)
        except RenderError as e:
            logger.error(f"Direction icon unavailable: {e}")
            return
        self.handles[RenderTarget.DIRECTION_ICON].set_image(arrow)


def select_presenter(kind: PlatformKind, handles: Mapping[RenderTarget, TrayHandle],
                     renderer: Optional[IconRenderer] = None,
                     arrows: Optional[DirectionIconSet] = None,
                     icon_dir: Optional[Path] = None) -> TrayPresenter:
    """Build the presenter variant for a platform kind.

    Args:
        kind: Result of resolve_platform_kind().
        handles: Tray handles keyed by target. TEXT needs TITLE_TEXT,
            ICONS needs the four icon targets.
        renderer: Icon renderer (ICONS only).
        arrows: Direction icon set (ICONS only).
        icon_dir: Where rendered icons are written (ICONS only).
    """
    if kind is PlatformKind.ICONS:
        if icon_dir is None:
            raise ValueError("icon_dir is required for icon presentation")
        return IconTrayPresenter(
            handles,
            renderer or IconRenderer(),
            arrows or DirectionIconSet(),
            icon_dir,
        )
    return TextTrayPresenter(handles[RenderTarget.TITLE_TEXT])
