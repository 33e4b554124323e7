import logging
import math
from typing import Iterator, List, Sequence, Tuple

import dearpygui.dearpygui as dpg

from procgen import DEFAULT_SKEW_STEP, Seed, Terrain, TerrainSample

logger = logging.getLogger("procgen.MapView")
logger.addHandler(logging.NullHandler())

HEX_SIZE = 10
LAYERS = ["biome", "height", "temperature", "precipitation"]

RGBA = Tuple[int, int, int, int]


def hex_to_pixel(q, r, size=HEX_SIZE):
    x = size * 3 / 2 * q
    y = size * math.sqrt(3) * (r + q / 2)
    return x, y


def hex_distance(q, r):
    return max(abs(q), abs(r), abs(q + r))


def hex_range(radius: int) -> Iterator[Tuple[int, int]]:
    """Axial coordinates within ``radius`` of the origin, nearest rings first."""
    cells = [
        (q, r)
        for q in range(-radius, radius + 1)
        for r in range(max(-radius, -q - radius), min(radius, -q + radius) + 1)
    ]
    return iter(sorted(cells, key=lambda c: hex_distance(*c)))


angles = [math.radians(60 * i) for i in range(6)]


def hex_corners(x, y, size=HEX_SIZE):
    return [
        (x + size * math.cos(a), y + size * math.sin(a))
        for a in angles
    ]


def point_for_pixel(x: float, y: float, world_size: Tuple[int, int]) -> List[float]:
    """Terrain point for a pixel offset from the map center; one tile spans ``world_size`` pixels."""
    width, height = world_size
    return [int(x) / width, int(y) / height]


def to_rgba(color: Sequence[float]) -> RGBA:
    r, g, b = (int(round(max(0.0, min(1.0, c)) * 255)) for c in color)
    return (r, g, b, 255)


def grayscale_color(value: float) -> RGBA:
    level = int(max(0.0, min(1.0, value)) * 255)
    return (level, level, level, 255)


def tile_color(sample: TerrainSample, layer: str) -> RGBA:
    if layer == "height":
        return grayscale_color(sample.height)
    if layer == "temperature":
        return grayscale_color(sample.temperature)
    if layer == "precipitation":
        return grayscale_color(sample.precipitation)
    return to_rgba(sample.background)


class MapView:
    """Animated preview of a terrain: a hex patch around the origin, redrawn every frame."""

    def __init__(
        self,
        terrain: Terrain,
        seed: Seed,
        size=(800, 800),
        *,
        radius: int = 20,
        world_size: Tuple[int, int] = (800, 600),
        skew_step: float = DEFAULT_SKEW_STEP,
    ):
        self.terrain = terrain
        self.seed = seed
        self.size = size
        self.radius = radius
        self.world_size = world_size
        self.skew_step = skew_step
        self.layer_index = 0
        self.paused = False
        self.cells = list(hex_range(radius))

        dpg.create_context()
        dpg.create_viewport(title="Terrain Preview", width=size[0], height=size[1])
        with dpg.window(tag="_map_window", width=size[0], height=size[1], no_move=True, no_resize=True, no_title_bar=True):
            self.canvas = dpg.add_drawlist(width=size[0], height=size[1], tag="_canvas")
        dpg.set_primary_window("_map_window", True)
        with dpg.handler_registry():
            dpg.add_key_press_handler(callback=self._on_key)
        dpg.setup_dearpygui()
        dpg.show_viewport()

    def _on_key(self, sender, app_data):
        if app_data == dpg.mvKey_Tab:
            self.layer_index = (self.layer_index + 1) % len(LAYERS)
        elif app_data == dpg.mvKey_F1:
            self.layer_index = 0
        elif app_data == dpg.mvKey_F2:
            self.layer_index = 1
        elif app_data == dpg.mvKey_F3:
            self.layer_index = 2
        elif app_data == dpg.mvKey_F4:
            self.layer_index = 3
        elif app_data == dpg.mvKey_P:
            self.paused = not self.paused

    def draw_map(self):
        dpg.delete_item(self.canvas, children_only=True)
        cx, cy = self.size[0] / 2, self.size[1] / 2
        layer = LAYERS[self.layer_index]
        for q, r in self.cells:
            x, y = hex_to_pixel(q, r)
            sample = self.terrain.sample(self.seed, point_for_pixel(x, y, self.world_size))
            color = tile_color(sample, layer)
            dpg.draw_polygon(hex_corners(x + cx, y + cy), color=color, fill=color, parent=self.canvas)

    def run(self):
        logger.info("Preview running with %s (%d hexes)", self.seed, len(self.cells))
        while dpg.is_dearpygui_running():
            self.draw_map()
            if not self.paused:
                self.seed = self.seed.advance(self.skew_step)
            dpg.render_dearpygui_frame()
        dpg.destroy_context()
        return self.seed
