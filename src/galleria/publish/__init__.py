from .interfaces import PublishListener, Renderer, TemplateResolver
from .publisher import PublishState, Publisher
from .templates import DirectoryTemplate, DirectoryTemplateResolver

__all__ = [
    "DirectoryTemplate",
    "DirectoryTemplateResolver",
    "PublishListener",
    "PublishState",
    "Publisher",
    "Renderer",
    "TemplateResolver",
]
