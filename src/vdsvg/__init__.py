"""Vector drawable to SVG export.

Converts a tree of vector, group, and path layers (the model behind
Android vector drawables) to an SVG document. Group transforms are
written as SVG transform lists and trimmed paths are emulated
with stroke dashes.
"""

import importlib.metadata

__version__ = importlib.metadata.version('vdsvg')
