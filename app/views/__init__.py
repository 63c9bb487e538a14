"""View components for Nightscout Tray UI.

Contains:
- icons: Tray icon rendering and direction arrow assets
- tray: Presenter variants and tray handle adapters
- menu_builder: Context menu construction
"""
from app.views.icons import DirectionIconSet, IconRenderer, sanitize_icon_text
from app.views.menu_builder import MenuBuilder, MenuCallbacks, MenuEntry
from app.views.tray import (
    IconTrayPresenter,
    PlatformKind,
    RenderTarget,
    TextTrayPresenter,
    resolve_platform_kind,
    select_presenter,
)

__all__ = [
    "DirectionIconSet",
    "IconRenderer",
    "IconTrayPresenter",
    "MenuBuilder",
    "MenuCallbacks",
    "MenuEntry",
    "PlatformKind",
    "RenderTarget",
    "TextTrayPresenter",
    "resolve_platform_kind",
    "sanitize_icon_text",
    "select_presenter",
]
