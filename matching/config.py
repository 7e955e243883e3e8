"""
Matching Configuration

Central configuration for a matching run.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_LIMIT_PROCESSED_PRODUCTS = 50
DEFAULT_OUTPUT_DIR = Path("./out/equalProductsFinder")


@dataclass(frozen=True)
class MatchingConfig:
    """Settings consumed by the comparison scheduler"""
    # Products of the smaller catalog scored per pair (bounds runtime)
    limit_processed_products: int = DEFAULT_LIMIT_PROCESSED_PRODUCTS

    # Output locations
    output_dir: Path = DEFAULT_OUTPUT_DIR
    mapping_view_dir: Optional[Path] = None  # None disables the token mapping dump

    # One worker per catalog pair
    workers: int = 3

    def __post_init__(self):
        if self.limit_processed_products < 0:
            raise ValueError(
                f"limit_processed_products must be >= 0, got {self.limit_processed_products}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        object.__setattr__(self, 'output_dir', Path(self.output_dir))
        if self.mapping_view_dir is not None:
            object.__setattr__(self, 'mapping_view_dir', Path(self.mapping_view_dir))

    @classmethod
    def from_env(cls) -> "MatchingConfig":
        """Build config from MATCHER_* environment variables, falling back to defaults."""
        limit = os.environ.get('MATCHER_LIMIT_PROCESSED_PRODUCTS')
        mapping_view = os.environ.get('MATCHER_MAPPING_VIEW_DIR')
        return cls(
            limit_processed_products=int(limit) if limit else DEFAULT_LIMIT_PROCESSED_PRODUCTS,
            output_dir=Path(os.environ.get('MATCHER_OUTPUT_DIR', str(DEFAULT_OUTPUT_DIR))),
            mapping_view_dir=Path(mapping_view) if mapping_view else None,
        )


# Default configuration instance
default_config = MatchingConfig()
