"""
CSS color syntax validation.

Accepts hex notation (#rgb, #rgba, #rrggbb, #rrggbbaa), the rgb()/rgba()/
hsl()/hsla() functions in both comma and space syntax, named colors,
`transparent` and `currentcolor`.
"""

import re
from typing import Optional


NAMED_COLORS = frozenset("""
aliceblue antiquewhite aqua aquamarine azure beige bisque black blanchedalmond blue
blueviolet brown burlywood cadetblue chartreuse chocolate coral cornflowerblue cornsilk
crimson cyan darkblue darkcyan darkgoldenrod darkgray darkgreen darkgrey darkkhaki
darkmagenta darkolivegreen darkorange darkorchid darkred darksalmon darkseagreen
darkslateblue darkslategray darkslategrey darkturquoise darkviolet deeppink deepskyblue
dimgray dimgrey dodgerblue firebrick floralwhite forestgreen fuchsia gainsboro ghostwhite
gold goldenrod gray green greenyellow grey honeydew hotpink indianred indigo ivory khaki
lavender lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
lightgoldenrodyellow lightgray lightgreen lightgrey lightpink lightsalmon lightseagreen
lightskyblue lightslategray lightslategrey lightsteelblue lightyellow lime limegreen linen
magenta maroon mediumaquamarine mediumblue mediumorchid mediumpurple mediumseagreen
mediumslateblue mediumspringgreen mediumturquoise mediumvioletred midnightblue mintcream
mistyrose moccasin navajowhite navy oldlace olive olivedrab orange orangered orchid
palegoldenrod palegreen paleturquoise palevioletred papayawhip peachpuff peru pink plum
powderblue purple rebeccapurple red rosybrown royalblue saddlebrown salmon sandybrown
seagreen seashell sienna silver skyblue slateblue slategray slategrey snow springgreen
steelblue tan teal thistle tomato turquoise violet wheat white whitesmoke yellow
yellowgreen transparent currentcolor
""".split())

_HEX_RE = re.compile(r"^#(?:[0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$")

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?"
_PERCENT = _NUMBER + r"%"
_ALPHA = rf"(?:{_PERCENT}|{_NUMBER})"
_HUE = rf"{_NUMBER}(?:deg|rad|grad|turn)?"

# rgb(1, 2, 3) / rgba(1, 2, 3, 0.5) / rgb(1 2 3 / 50%)
_RGB_RE = re.compile(
    rf"^rgba?\(\s*"
    rf"(?:"
    rf"(?:{_NUMBER}\s*,\s*{_NUMBER}\s*,\s*{_NUMBER}|{_PERCENT}\s*,\s*{_PERCENT}\s*,\s*{_PERCENT})"
    rf"(?:\s*,\s*{_ALPHA})?"
    rf"|"
    rf"(?:{_NUMBER}\s+{_NUMBER}\s+{_NUMBER}|{_PERCENT}\s+{_PERCENT}\s+{_PERCENT})"
    rf"(?:\s*/\s*{_ALPHA})?"
    rf")\s*\)$"
)

_HSL_RE = re.compile(
    rf"^hsla?\(\s*"
    rf"(?:"
    rf"{_HUE}\s*,\s*{_PERCENT}\s*,\s*{_PERCENT}(?:\s*,\s*{_ALPHA})?"
    rf"|"
    rf"{_HUE}\s+{_PERCENT}\s+{_PERCENT}(?:\s*/\s*{_ALPHA})?"
    rf")\s*\)$"
)


def is_valid_color(value: Optional[str]) -> bool:
    """Проверить, что строка является валидным CSS цветом."""
    if not isinstance(value, str):
        return False

    text = value.strip().lower()
    if not text:
        return False

    if text.startswith("#"):
        return bool(_HEX_RE.match(text))
    if text in NAMED_COLORS:
        return True
    return bool(_RGB_RE.match(text) or _HSL_RE.match(text))
