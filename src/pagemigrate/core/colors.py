"""Map arbitrary CSS color strings onto the editor's ten color tokens"""

import re

from pagemigrate.core.models import ColorToken


HEX6_RE = re.compile(r'^#[0-9a-f]{6}$')

COLOR_MAP: dict[str, ColorToken] = {
    # named colors
    'red':     ColorToken.red,
    'orange':  ColorToken.orange,
    'yellow':  ColorToken.yellow,
    'green':   ColorToken.green,
    'blue':    ColorToken.blue,
    'purple':  ColorToken.purple,
    'pink':    ColorToken.pink,
    'gray':    ColorToken.gray,
    'grey':    ColorToken.gray,
    'brown':   ColorToken.brown,
    # basic hex values
    '#ff0000': ColorToken.red,
    '#ffa500': ColorToken.orange,
    '#ffff00': ColorToken.yellow,
    '#00ff00': ColorToken.green,
    '#0000ff': ColorToken.blue,
    '#800080': ColorToken.purple,
    '#ffc0cb': ColorToken.pink,
    '#808080': ColorToken.gray,
    '#a52a2a': ColorToken.brown,
    # legacy editor palette
    '#ffeb3b': ColorToken.yellow,
    '#fff9c4': ColorToken.yellow,
    '#f44336': ColorToken.red,
    '#ff5722': ColorToken.orange,
    '#4caf50': ColorToken.green,
    '#2196f3': ColorToken.blue,
    '#9c27b0': ColorToken.purple,
    '#e91e63': ColorToken.pink,
}


def _from_rgb(r: int, g: int, b: int) -> ColorToken | None:
    """Ordered channel heuristics; the first rule that fires wins."""
    if r > g and r > b:
        return ColorToken.red
    if g > r and g > b:
        return ColorToken.green
    if b > r and b > g:
        return ColorToken.blue
    if r > 200 and g > 200 and b < 100:
        return ColorToken.yellow
    if r > 200 and g < 150 and b > 150:
        return ColorToken.pink
    if r > 150 and g < 100 and b > 150:
        return ColorToken.purple
    if r > 200 and 100 < g < 180 and b < 100:
        return ColorToken.orange
    if r < 150 and g < 150 and b < 150:
        return ColorToken.gray
    return None


def map_color(color: str) -> ColorToken:
    """Resolve a CSS color (name or #rrggbb) to a ColorToken, defaulting to gray.

    Total over all input: unknown names, short hex, rgb() notation and
    non-string values all fall through to gray.
    """
    if not isinstance(color, str):
        return ColorToken.gray
    normalized = color.lower().strip()

    if normalized in COLOR_MAP:
        return COLOR_MAP[normalized]

    if HEX6_RE.match(normalized):
        r, g, b = (int(normalized[i:i + 2], 16) for i in (1, 3, 5))
        token = _from_rgb(r, g, b)
        if token is not None:
            return token

    return ColorToken.gray
