"""
Document tree for markdown documents, with structural transformations
to prepare the tree for a documentation renderer.
"""

__version__ = "0.1.0"
