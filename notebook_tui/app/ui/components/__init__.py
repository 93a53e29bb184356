"""
Reusable UI components.

This package provides common UI building blocks shared by the pages:
- SelectableList: Ordered, cursor-navigable choices with lazy producers
"""

from .selectable_list import SelectableList

__all__ = [
    'SelectableList',
]
