"""
Angle catalog and batch generation utilities.
"""
from .angle_catalog import DEFAULT_CATALOG, AngleCatalog, ViewSpec, load_angle_catalog
from .batch_generator import BatchGenerator, collect_outcomes, generate_views, reduce_outcomes

__all__ = [
    "AngleCatalog",
    "BatchGenerator",
    "DEFAULT_CATALOG",
    "ViewSpec",
    "collect_outcomes",
    "generate_views",
    "load_angle_catalog",
    "reduce_outcomes",
]
