from typing import List

from rmqtimeline.render.base import BaseRenderer
from rmqtimeline.render.html_renderer import HtmlRenderer
from rmqtimeline.render.json_renderer import JsonRenderer
from rmqtimeline.render.text_renderer import TextRenderer

RENDERERS = {
    HtmlRenderer.name: HtmlRenderer,
    JsonRenderer.name: JsonRenderer,
    TextRenderer.name: TextRenderer,
}


def get_renderer(name: str) -> BaseRenderer:
    """Get a renderer by output format name."""
    renderer_class = RENDERERS.get(name)
    if renderer_class:
        return renderer_class()
    else:
        raise ValueError(f"No renderer available for format: {name}")


def get_supported_renderers() -> List[str]:
    return list(RENDERERS)
