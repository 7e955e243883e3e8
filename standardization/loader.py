"""
Catalog Loader

Reads one e-shop's normalized catalog (JSON array of product records)
and returns validated NormalizedProduct instances.

Usage:
    products = load_catalog(Path("data/kosik.json"), Eshop.KOSIK)
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from .models import CatalogFile
from .schema import Eshop, NormalizedProduct

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """Raised when a catalog file is missing or malformed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load catalog {path}: {reason}")


def parse_catalog(data, eshop: Eshop) -> List[NormalizedProduct]:
    """Validate already-decoded JSON data and build products."""
    catalog = CatalogFile.model_validate(data)
    return [record.to_product(eshop) for record in catalog.root]


def load_catalog(path: Union[str, Path], eshop: Union[str, Eshop]) -> List[NormalizedProduct]:
    """
    Load a normalized catalog file.

    Raises:
        CatalogLoadError: file missing, not JSON, or records fail validation
    """
    path = Path(path)
    eshop = Eshop(eshop)

    if not path.exists():
        raise CatalogLoadError(path, "file not found")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(path, f"invalid JSON ({e})") from e

    try:
        products = parse_catalog(data, eshop)
    except ValidationError as e:
        raise CatalogLoadError(path, f"{e.error_count()} invalid record field(s)\n{e}") from e

    if not products:
        logger.warning(f"No products in {path}")

    logger.info(f"Loaded {len(products)} {eshop.value} products from {path}")
    return products
