# app.py
# Kivy shell for the thin lens ray diagram: frame clock, pointer polling,
# lens toggle and texture upload. All drawing goes through FrameDriver.

import os

from kivy.app import App
from kivy.lang import Builder
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.uix.boxlayout import BoxLayout
from kivy.properties import StringProperty, NumericProperty, BooleanProperty
from kivy.logger import Logger
from kivy.graphics.texture import Texture

from thinlens import config
from thinlens.frame import FrameDriver
from thinlens.optics import lens_state, toggle_lens
from thinlens.render import PillowRenderer

KV_FILE = os.path.join(os.path.dirname(__file__), 'lensview.kv')


class MainUI(BoxLayout):
    focal = NumericProperty(config.FOCAL_LENGTH)
    show_grid = BooleanProperty(False)
    lens_label = StringProperty('')

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.lens = lens_state(self.focal)
        self.renderer = PillowRenderer(config.CANVAS_WIDTH, config.CANVAS_HEIGHT)
        self.driver = FrameDriver(self.renderer, config.CANVAS_WIDTH, config.CANVAS_HEIGHT,
                                  config.OBJECT_HEIGHT, show_grid=self.show_grid)
        # canvas pixels; start with the object 2f left of the lens
        self.pointer = (config.CANVAS_WIDTH / 2.0 - 2 * self.focal, config.CANVAS_HEIGHT / 2.0)
        self._touching = False
        self._texture = None
        self._update_lens_label()
        self._frame_event = Clock.schedule_interval(self.render_frame, 1.0 / config.FRAME_RATE)

    def toggle_lens(self):
        self.lens = toggle_lens(self.lens)
        self._update_lens_label()
        Logger.info(f"ThinLens: lens is now {self.lens_label.lower()}")

    def toggle_grid(self, show):
        self.show_grid = show

    def on_show_grid(self, instance, value):
        self.driver.show_grid = value

    def _update_lens_label(self):
        self.lens_label = 'Converging' if self.lens.is_converging else 'Diverging'

    def stop(self):
        if self._frame_event is not None:
            self._frame_event.cancel()
            self._frame_event = None

    def _canvas_pointer(self, pos):
        """Window coordinates -> canvas pixels, or None when outside the view."""
        view = self.ids.get('png_view')
        if view is None or not view.collide_point(*pos):
            return None
        px, py = view.pos
        pw, ph = view.size
        if pw <= 0 or ph <= 0:
            return None
        nx = (pos[0] - px) / pw
        ny = (pos[1] - py) / ph
        # Kivy y grows upward, canvas y grows downward
        return nx * config.CANVAS_WIDTH, (1.0 - ny) * config.CANVAS_HEIGHT

    def _poll_pointer(self):
        if self._touching:
            return
        sample = self._canvas_pointer(Window.mouse_pos)
        if sample is not None:
            self.pointer = sample

    def render_frame(self, dt=None):
        self._poll_pointer()
        self.driver.render_frame(self.pointer, self.lens)
        self._update_texture_from_pil(self.renderer.image)

    def _update_texture_from_pil(self, pil_img):
        w, h = pil_img.size
        try:
            if self._texture is None or self._texture.size != (w, h):
                self._texture = Texture.create(size=(w, h), colorfmt='rgba')
                # PIL rows run top-to-bottom; flip once on the texture
                self._texture.flip_vertical()
            self._texture.blit_buffer(pil_img.tobytes(), colorfmt='rgba', bufferfmt='ubyte')
            img_widget = self.ids.get('png_view')
            if img_widget:
                img_widget.texture = self._texture
                img_widget.canvas.ask_update()
        except Exception as e:
            Logger.error(f"ThinLens: Texture update failed: {e}")
            self._texture = None

    def on_touch_down(self, touch):
        ctrl_panel = self.ids.get('control_panel')
        if ctrl_panel and ctrl_panel.collide_point(*touch.pos):
            return super().on_touch_down(touch)
        sample = self._canvas_pointer(touch.pos)
        if sample is not None:
            self._touching = True
            self.pointer = sample
            return True
        return super().on_touch_down(touch)

    def on_touch_move(self, touch):
        if self._touching:
            sample = self._canvas_pointer(touch.pos)
            if sample is not None:
                self.pointer = sample
            return True
        return super().on_touch_move(touch)

    def on_touch_up(self, touch):
        if self._touching:
            self._touching = False
            return True
        return super().on_touch_up(touch)


class ThinLensApp(App):
    title = 'Thin Lens Ray Diagram'

    def build(self):
        if os.path.exists(KV_FILE):
            Builder.load_file(KV_FILE)
        else:
            Logger.error(f"ThinLens: '{KV_FILE}' not found.")
        Logger.info(f"ThinLens: Starting, f = {config.FOCAL_LENGTH:g}, "
                    f"canvas {config.CANVAS_WIDTH}x{config.CANVAS_HEIGHT}")
        return MainUI()

    def on_stop(self):
        root = getattr(self, 'root', None)
        if root is not None:
            root.stop()


def main():
    ThinLensApp().run()


if __name__ == '__main__':
    main()
