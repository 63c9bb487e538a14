#!/usr/bin/env python3
"""
Generate the direction arrow tray icons.
Creates assets/arrows/16x16_<code>_<variant>.ico for every trend direction.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.views.icons import DirectionIconSet, arrow_filename, draw_arrow_icon  # noqa: E402
from config import ASSETS, UI  # noqa: E402
from nightscout.directions import DIRECTIONS  # noqa: E402


def create_arrow_icons(output_dir: Path) -> int:
    """Write one icon per direction code and color variant."""
    output_dir.mkdir(parents=True, exist_ok=True)
    count = 0

    for variant, color in DirectionIconSet.VARIANT_COLORS.items():
        for code in DIRECTIONS:
            icon = draw_arrow_icon(code, color)
            path = output_dir / arrow_filename(code, variant)
            icon.save(path, format="ICO", sizes=[(UI.ICON_SIZE, UI.ICON_SIZE)])
            count += 1

    return count


def main():
    output_dir = ASSETS.arrow_dir
    count = create_arrow_icons(output_dir)
    print(f"Created {count} arrow icons in {output_dir}")


if __name__ == '__main__':
    main()
