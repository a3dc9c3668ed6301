"""Collapsible hierarchy editor: tree model, layout, transitions and views"""

__version__ = "1.0.0"
