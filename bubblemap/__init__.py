"""BubbleMap - a physics-settled bubble diagram surface."""

__version__ = "1.0.0"
__app_id__ = "io.github.bubblemap.BubbleMap"
