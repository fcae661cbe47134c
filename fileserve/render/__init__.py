from fileserve.config import PresentationMode, ServerConfig
from fileserve.render.base import ListingRenderer
from fileserve.render.minimal import MinimalRenderer
from fileserve.render.styled import StyledRenderer

renderers = {
    PresentationMode.MINIMAL: MinimalRenderer,
    PresentationMode.STYLED: StyledRenderer,
}


def get_renderer(config:ServerConfig) -> ListingRenderer:
    return renderers[config.mode](config.root, config.language)
