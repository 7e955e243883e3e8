"""
Standardization Module

Common product record all e-shop catalogs are mapped into, plus the
name normalization the matching engine relies on.

Key Components:
- NormalizedProduct: Unified product schema
- tokenize_name / strip_whitespace: Name forms used by the similarity metrics
- load_catalog: Read and validate a normalized catalog file
"""

from .schema import Eshop, UnitType, NutritionalValues, NormalizedProduct
from .name_normalizer import tokenize_name, strip_whitespace, make_file_safe_key
from .loader import load_catalog, parse_catalog, CatalogLoadError

__all__ = [
    # Schema
    'Eshop',
    'UnitType',
    'NutritionalValues',
    'NormalizedProduct',

    # Name normalization
    'tokenize_name',
    'strip_whitespace',
    'make_file_safe_key',

    # Loading
    'load_catalog',
    'parse_catalog',
    'CatalogLoadError',
]
