"""Page rendering adapters."""

from bookmark_mirror.adapters.renderer.http_renderer import HttpPageRenderer, serialize_page
from bookmark_mirror.adapters.renderer.protocols import PageRenderer, PageSnapshot, RenderedPage

__all__ = ["HttpPageRenderer", "PageRenderer", "PageSnapshot", "RenderedPage", "serialize_page"]
