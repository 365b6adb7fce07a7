"""
Template Layer

RESPONSIBILITY: Turn declarative templates into subgraphs; manage saved boards
ALLOWED INPUTS: Template keys, TemplateSpec, Graph (for saving)
OUTPUTS: TemplateResult, SavedTemplate

WHAT THIS LAYER MUST NOT DO:
============================
- Write into the store (the session appends results)
- Run the final layout (the session defers it)
- Raise on an unknown template key
"""

from .catalog import BUILTIN_TEMPLATES, TemplateCatalog, TemplateSection, TemplateSpec
from .instantiator import (
    LEAF_STYLE, ROOT_STYLE, SECTION_STYLE,
    NodeStyle, TemplateInstantiator, TemplateResult, grid_positions,
)
from .saved import SavedTemplate, SavedTemplateLibrary

__all__ = [
    'BUILTIN_TEMPLATES', 'TemplateCatalog', 'TemplateSection', 'TemplateSpec',
    'LEAF_STYLE', 'ROOT_STYLE', 'SECTION_STYLE',
    'NodeStyle', 'TemplateInstantiator', 'TemplateResult', 'grid_positions',
    'SavedTemplate', 'SavedTemplateLibrary',
]
