from .arrays import (
    calc_average,
    calc_maximum,
    calc_median,
    calc_minimum,
    calc_sum,
    generate_random_permutation,
)
from .layout import Layout
from .network import Network
from .persistence import (
    LayoutDeserializationError,
    LayoutIOError,
    LayoutPersistenceError,
    load_layout,
    save_layout,
)
from .optimizer import (
    GradientDescentOptions,
    LayoutOptimizer,
    LayoutOptions,
    LayoutResult,
    get_default_layout_options,
    optimize_layout,
    set_default_layout_options,
)

__version__ = "0.1.0"

__all__ = [
    'Layout',
    'Network',
    'LayoutOptimizer',
    'LayoutOptions',
    'GradientDescentOptions',
    'LayoutResult',
    'optimize_layout',
    'get_default_layout_options',
    'set_default_layout_options',
    'save_layout',
    'load_layout',
    'LayoutPersistenceError',
    'LayoutIOError',
    'LayoutDeserializationError',
    'calc_sum',
    'calc_minimum',
    'calc_maximum',
    'calc_average',
    'calc_median',
    'generate_random_permutation',
]
