import dearpygui.dearpygui as dpg

from game.position import Direction, PositionWatcher
from game.view import CacheView
from world.grid import GridAddress

CELL_SIZE = 24

EMPTY_COLOR = (120, 120, 120, 160)
CACHE_COLOR = (255, 200, 40, 255)
PLAYER_COLOR = (220, 40, 40, 255)
TRAIL_COLOR = (40, 110, 220, 255)

FIX_LAT = "_sensor_lat"
FIX_LNG = "_sensor_lng"


def value_color(value, max_value=100):
    """Shade caches from grey (empty) to gold (rich)."""
    if value <= 0:
        return EMPTY_COLOR
    t = min(1.0, value / max_value)
    r, g, b, a = CACHE_COLOR
    return (int(120 + (r - 120) * t), int(120 + (g - 120) * t), int(120 + (b - 120) * t), a)


def add_fix_inputs():
    """Lat/lng entry for manual sensor fixes, kept in double precision."""
    dpg.add_input_double(label="lat", tag=FIX_LAT, format="%.8f", step=0)
    dpg.add_input_double(label="lng", tag=FIX_LNG, format="%.8f", step=0)


def read_fix():
    return dpg.get_value(FIX_LAT), dpg.get_value(FIX_LNG)


class Camera:
    """Simple camera handling panning and zoom around the player's cell."""

    def __init__(self, width, height):
        self.offset_x = width // 2
        self.offset_y = height // 2
        self.zoom = 1.0

    def apply(self, pos):
        x, y = pos
        return (
            x * self.zoom + self.offset_x,
            y * self.zoom + self.offset_y,
        )

    def reverse(self, pos):
        x, y = pos
        return (
            (x - self.offset_x) / self.zoom,
            (y - self.offset_y) / self.zoom,
        )

    def pan(self, dx, dy):
        self.offset_x += dx
        self.offset_y += dy

    def change_zoom(self, delta, pivot):
        old = self.zoom
        self.zoom = max(0.2, min(4.0, self.zoom + delta))
        scale = self.zoom / old
        px, py = pivot
        self.offset_x = px - scale * (px - self.offset_x)
        self.offset_y = py - scale * (py - self.offset_y)


class MapView(CacheView):
    """
    dearpygui front end. Cells are drawn relative to the player's cell with
    north up; clicking a cache opens a popup with collect and deposit buttons.
    """

    def __init__(self, size=(800, 600)):
        self.size = size
        self.camera = Camera(*size)
        self.game = None
        self.watcher = None
        self.visible = {}
        self.trail = []
        self.player = None
        self.selected = None

        dpg.create_context()
        dpg.create_viewport(title="Geocoin Carrier", width=size[0], height=size[1])
        with dpg.window(tag="_map_window", width=size[0], height=size[1], no_move=True, no_resize=True, no_title_bar=True):
            self.canvas = dpg.add_drawlist(width=size[0], height=size[1], tag="_canvas")
        with dpg.window(tag="_control_window", pos=(10, 10), width=190, height=230, no_resize=True, no_move=True, no_title_bar=True):
            dpg.add_text("", tag="_status", wrap=170)
            dpg.add_button(label="North", callback=self._step, user_data=Direction.NORTH)
            with dpg.group(horizontal=True):
                dpg.add_button(label="West", callback=self._step, user_data=Direction.WEST)
                dpg.add_button(label="East", callback=self._step, user_data=Direction.EAST)
            dpg.add_button(label="South", callback=self._step, user_data=Direction.SOUTH)
            dpg.add_checkbox(label="Sensor", tag="_sensor", default_value=False, callback=self._toggle_sensor)
            add_fix_inputs()
            dpg.add_button(label="Send fix", callback=self._send_fix)
            dpg.add_button(label="Reset", callback=lambda: dpg.configure_item("_reset_popup", show=True))
        with dpg.window(tag="_cache_popup", label="Cache", show=False, width=220, height=110, no_resize=True):
            dpg.add_text("", tag="_cache_text")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Collect", callback=self._collect)
                dpg.add_button(label="Deposit", callback=self._deposit)
        with dpg.window(tag="_reset_popup", label="Erase your progress?", show=False, modal=True, width=240, height=80):
            with dpg.group(horizontal=True):
                dpg.add_button(label="Erase", callback=self._reset)
                dpg.add_button(label="Cancel", callback=lambda: dpg.configure_item("_reset_popup", show=False))
        dpg.set_primary_window("_map_window", True)
        with dpg.handler_registry():
            dpg.add_mouse_click_handler(callback=self._on_click)
            dpg.add_mouse_drag_handler(button=dpg.mvMouseButton_Middle, callback=self._on_drag)
            dpg.add_mouse_wheel_handler(callback=self._on_scroll)
            dpg.add_key_press_handler(callback=self._on_key)
        dpg.setup_dearpygui()
        dpg.show_viewport()

    def attach(self, game):
        self.game = game
        self.watcher = PositionWatcher(game)

    # CacheView hooks
    def show(self, cache):
        self.visible[cache.address] = cache

    def update(self, cache):
        self.visible[cache.address] = cache
        if self.selected == cache.address:
            self._describe(cache)

    def discard(self, address):
        self.visible.pop(address, None)
        if self.selected == address:
            self.selected = None
            dpg.configure_item("_cache_popup", show=False)

    def move_player(self, position, history):
        self.player = position
        self.trail = list(history) + [position]

    def notify(self, message):
        dpg.set_value("_status", message)

    # event callbacks
    def _step(self, sender, app_data, user_data):
        self.game.move(user_data)

    def _toggle_sensor(self, sender, app_data):
        if bool(app_data):
            self.watcher.start()
        else:
            self.watcher.stop()

    def _send_fix(self):
        self.watcher.feed(*read_fix())

    def _reset(self):
        dpg.configure_item("_reset_popup", show=False)
        self.game.reset()

    def _collect(self):
        if self.selected is not None:
            self.game.collect(self.selected)

    def _deposit(self):
        if self.selected is not None:
            self.game.deposit(self.selected)

    def _on_click(self, sender, app_data):
        if app_data != dpg.mvMouseButton_Left or dpg.is_item_hovered("_control_window"):
            return
        if dpg.is_item_shown("_cache_popup") and dpg.is_item_hovered("_cache_popup"):
            return
        address = self.address_at_pos(dpg.get_mouse_pos())
        cache = self.visible.get(address)
        if cache is not None:
            self.selected = address
            self._describe(cache)
            dpg.configure_item("_cache_popup", show=True, pos=dpg.get_mouse_pos())

    def _on_drag(self, sender, app_data):
        dx, dy = app_data[1], app_data[2]
        self.camera.pan(dx, dy)

    def _on_scroll(self, sender, app_data):
        pos = dpg.get_mouse_pos()
        self.camera.change_zoom(app_data * 0.1, pos)

    def _on_key(self, sender, app_data):
        keys = {
            dpg.mvKey_Up: Direction.NORTH,
            dpg.mvKey_Down: Direction.SOUTH,
            dpg.mvKey_Left: Direction.WEST,
            dpg.mvKey_Right: Direction.EAST,
        }
        if app_data in keys:
            self.game.move(keys[app_data])

    def _describe(self, cache):
        top = cache.peek()
        text = f"Cache {cache.address}: {cache.value} coins"
        if top is not None:
            text += f"\ntop: {top.identity}"
        dpg.set_value("_cache_text", text)

    # drawing
    def cell_rect(self, address):
        center = self.game.address
        x = (address.j - center.j) * CELL_SIZE
        y = (center.i - address.i) * CELL_SIZE
        p1 = self.camera.apply((x - CELL_SIZE / 2, y - CELL_SIZE / 2))
        p2 = self.camera.apply((x + CELL_SIZE / 2, y + CELL_SIZE / 2))
        return p1, p2

    def geo_to_pixel(self, position):
        settings = self.game.world_settings
        center = self.game.address
        fx = (position.lng - settings.origin_lng) / settings.tile_degrees - center.j - 0.5
        fy = center.i + 0.5 - (position.lat - settings.origin_lat) / settings.tile_degrees
        return self.camera.apply((fx * CELL_SIZE, fy * CELL_SIZE))

    def address_at_pos(self, pos):
        x, y = self.camera.reverse(pos)
        center = self.game.address
        dj = int((x + CELL_SIZE / 2) // CELL_SIZE)
        di = int((y + CELL_SIZE / 2) // CELL_SIZE)
        return GridAddress(center.i - di, center.j + dj)

    def draw_map(self):
        dpg.delete_item(self.canvas, children_only=True)
        if self.game is None:
            return
        max_value = max(1, self.game.world_settings.max_initial_coins)
        for address, cache in self.visible.items():
            p1, p2 = self.cell_rect(address)
            color = value_color(cache.value, max_value)
            dpg.draw_rectangle(p1, p2, color=(0, 0, 0, 255), fill=color, parent=self.canvas)
            dpg.draw_text((p1[0] + 2, p1[1] + 4), str(cache.value), color=(0, 0, 0, 255), size=11, parent=self.canvas)
        if self.selected is not None and self.selected in self.visible:
            p1, p2 = self.cell_rect(self.selected)
            dpg.draw_rectangle(p1, p2, color=(255, 255, 255, 255), thickness=3, parent=self.canvas)
        if len(self.trail) > 1:
            points = [self.geo_to_pixel(p) for p in self.trail]
            dpg.draw_polyline(points, color=TRAIL_COLOR, thickness=2, parent=self.canvas)
        if self.player is not None:
            dpg.draw_circle(self.geo_to_pixel(self.player), 6, color=(0, 0, 0, 255), fill=PLAYER_COLOR, parent=self.canvas)

    def run(self):
        while dpg.is_dearpygui_running():
            self.draw_map()
            dpg.render_dearpygui_frame()
        dpg.destroy_context()
