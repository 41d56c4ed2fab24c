"""Click target — Drew's face, plus the coins popping off it."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget
from textual.reactive import reactive

from droodle.engine.clicks import CLICK_REGION, ClickRegion
from droodle.engine.effects import EffectMarker

FACE = [
    "   .-\"\"\"\"-.   ",
    "  /  o  o  \\  ",
    " |    __    | ",
    "  \\  \\__/  /  ",
    "   '-....-'   ",
]


def _coin_style(opacity: float) -> str:
    if opacity > 0.66:
        return "bold yellow"
    if opacity > 0.33:
        return "yellow"
    return "dim yellow"


class ClickTarget(Widget):
    """Maps terminal cells onto the game's click region.

    The whole widget stands in for the clickable rectangle, so a mouse
    click becomes screen coordinates inside ``click_region``.
    """

    DEFAULT_CSS = """
    ClickTarget {
        width: 100%;
        height: 1fr;
        border: round $accent;
    }
    """

    class Clicked(Message):
        """Posted with game coordinates when the face is clicked."""

        def __init__(self, x: float, y: float) -> None:
            super().__init__()
            self.x = x
            self.y = y

    coin_frame: reactive[int] = reactive(0)

    def __init__(self, region: ClickRegion = CLICK_REGION, **kwargs) -> None:
        super().__init__(**kwargs)
        self.click_region = region
        self._markers: list[EffectMarker] = []

    def to_game(self, cx: int, cy: int) -> tuple[float, float]:
        """Cell coordinates → game coordinates (cell centres)."""
        w = max(self.content_size.width, 1)
        h = max(self.content_size.height, 1)
        r = self.click_region
        return (
            r.left + (cx + 0.5) / w * (r.right - r.left),
            r.top + (cy + 0.5) / h * (r.bottom - r.top),
        )

    def to_cell(self, x: float, y: float) -> tuple[int, int]:
        w = max(self.content_size.width, 1)
        h = max(self.content_size.height, 1)
        r = self.click_region
        cx = int((x - r.left) / (r.right - r.left) * w)
        cy = int((y - r.top) / (r.bottom - r.top) * h)
        return min(max(cx, 0), w - 1), min(max(cy, 0), h - 1)

    def on_click(self, event: events.Click) -> None:
        offset = event.get_content_offset(self)
        if offset is None:  # on the border
            return
        x, y = self.to_game(offset.x, offset.y)
        self.post_message(self.Clicked(x, y))

    def render(self) -> Text:
        w = max(self.content_size.width, 1)
        h = max(self.content_size.height, 1)
        grid = [[(" ", "")] * w for _ in range(h)]

        top = max((h - len(FACE)) // 2, 0)
        for row, line in enumerate(FACE):
            y = top + row
            if y >= h:
                break
            left = max((w - len(line)) // 2, 0)
            for col, ch in enumerate(line[: w - left]):
                grid[y][left + col] = (ch, "bold white")

        for marker in self._markers:
            cx, cy = self.to_cell(marker.x, marker.y)
            grid[cy][cx] = ("●", _coin_style(marker.opacity))

        text = Text()
        for y, row in enumerate(grid):
            for ch, style in row:
                text.append(ch, style=style)
            if y < h - 1:
                text.append("\n")
        return text

    def update_markers(self, markers: list[EffectMarker]) -> None:
        """Sync the visible coins with the live markers."""
        self._markers = list(markers)
        self.coin_frame += 1
