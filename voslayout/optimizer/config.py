"""Process-wide default options for layout runs."""

from __future__ import annotations

import copy

from .model import LayoutOptions

_DEFAULT_LAYOUT_OPTIONS = LayoutOptions()


def get_default_layout_options() -> LayoutOptions:
    return copy.deepcopy(_DEFAULT_LAYOUT_OPTIONS)


def set_default_layout_options(options: LayoutOptions) -> None:
    global _DEFAULT_LAYOUT_OPTIONS
    _DEFAULT_LAYOUT_OPTIONS = copy.deepcopy(options)


__all__ = ["get_default_layout_options", "set_default_layout_options"]
