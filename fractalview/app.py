"""
Main application module for the fractal viewer.

Contains the FractalApp class which handles:
- Window setup and main loop
- Forwarding scroll gestures to the fractal's zoom()
- Asking the fractal for a new frame whenever the view changed
- Keyboard shortcuts (reset, fullscreen, render mode, screenshot, quit)
"""

import os
from datetime import datetime

import pygame

from .compute import warmup_jit
from .logging_setup import get_logger
from .renderer import MandelbrotRenderer

logger = get_logger(__name__)


def image_to_surface(image):
    """Convert a (height, width, 4) RGBA array into a pygame Surface."""
    return pygame.surfarray.make_surface(image[:, :, :3].swapaxes(0, 1))


def save_image(image, filename):
    """
    Write an RGBA frame to disk (format chosen from the extension).

    Works without a display, so it can be used headless.
    """
    directory = os.path.dirname(os.path.abspath(filename))
    os.makedirs(directory, exist_ok=True)
    pygame.image.save(image_to_surface(image), filename)
    logger.info("Image saved to: %s", filename)
    return filename


class FractalApp:
    """
    Main application class for the fractal viewer.

    Handles the pygame window and event loop; all drawing goes through
    the fractal's render() and zoom() methods.
    """

    # Default configuration
    DEFAULT_WIDTH = 800
    DEFAULT_HEIGHT = 600
    MIN_SIZE = (320, 240)
    CAPTION = "Fractals - Scroll to zoom, R to reset, C to switch render mode"

    def __init__(self, fractal=None, width=None, height=None):
        """
        Initialize the application.

        Args:
            fractal: Object implementing render()/zoom() (new MandelbrotRenderer if None)
            width: Window width in pixels (default 800)
            height: Window height in pixels (default 600)
        """
        self.fractal = fractal if fractal is not None else MandelbrotRenderer()
        self.width = width or self.DEFAULT_WIDTH
        self.height = height or self.DEFAULT_HEIGHT

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.fullscreen = False

        self.current_image = None
        self.current_surface = None
        self.needs_render = True
        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        warmup_jit()

        self.running = True
        while self.running:
            self._handle_events()
            if self.needs_render:
                self._render()
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("Compiling (first run only)...")
        self.clock = pygame.time.Clock()

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEWHEEL:
                self._handle_zoom(event)
            elif event.type == pygame.VIDEORESIZE:
                self._handle_resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_zoom(self, event):
        """Handle mouse wheel zoom (wheel up zooms in)."""
        if event.y == 0:
            return
        mx, my = pygame.mouse.get_pos()
        self.fractal.zoom(self.width, self.height, mx, my, -event.y)
        self.needs_render = True

    def _handle_resize(self, width, height):
        self.width = max(self.MIN_SIZE[0], width)
        self.height = max(self.MIN_SIZE[1], height)
        if not self.fullscreen:
            self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        self.needs_render = True

    def _handle_key(self, event):
        """Handle keyboard input."""
        mods = pygame.key.get_mods()
        if event.key == pygame.K_ESCAPE or (event.key == pygame.K_w and mods & pygame.KMOD_CTRL):
            self.running = False
        elif event.key == pygame.K_r and hasattr(self.fractal, "params"):
            self.fractal.params.reset()
            self.needs_render = True
        elif event.key == pygame.K_f:
            self._toggle_fullscreen()
        elif event.key == pygame.K_c and hasattr(self.fractal, "sequential"):
            self.fractal.sequential = not self.fractal.sequential
            logger.info("Render mode: %s", "sequential" if self.fractal.sequential else "concurrent")
            self.needs_render = True
        elif event.key == pygame.K_s:
            self._save_screenshot()

    def _toggle_fullscreen(self):
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(
                (self.DEFAULT_WIDTH, self.DEFAULT_HEIGHT), pygame.RESIZABLE)
        self.width, self.height = self.screen.get_size()
        self.needs_render = True

    def _save_screenshot(self):
        """Save the current frame as a timestamped PNG in the working directory."""
        if self.current_image is None:
            return
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = save_image(self.current_image, f"fractal_{timestamp}.png")
        pygame.display.set_caption(f"Saved: {os.path.basename(filename)}")

    def _render(self):
        """Ask the fractal for a new frame of the current window size."""
        self.current_image = self.fractal.render(self.width, self.height)
        self.current_surface = image_to_surface(self.current_image)
        self.needs_render = False
        seconds = getattr(self.fractal, "last_render_seconds", None)
        if seconds is not None:
            pygame.display.set_caption(f"{self.CAPTION} ({seconds * 1000:.0f} ms)")
        else:
            pygame.display.set_caption(self.CAPTION)

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))
        pygame.display.flip()


def run(fractal=None, width=None, height=None):
    """
    Run the fractal viewer.

    Args:
        fractal: Object implementing render()/zoom() (Mandelbrot by default)
        width: Window width (default 800)
        height: Window height (default 600)
    """
    app = FractalApp(fractal, width, height)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
