"""
Catalog Index

Inverted index from name token to the products of one e-shop whose name
contains that token. Built once per catalog and only read afterwards, so
the three comparison workers can share it without locking.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from standardization.schema import Eshop, NormalizedProduct

logger = logging.getLogger(__name__)

# Tokens of this length or shorter ("1", "kg", "a") are not indexed
MIN_TOKEN_LENGTH = 3


def is_indexable(token: str) -> bool:
    return len(token) >= MIN_TOKEN_LENGTH


class CatalogIndex:
    """
    Token -> products mapping for one catalog.

    Usage:
        index = CatalogIndex(kosik_products, Eshop.KOSIK)
        index.lookup("gala")  # [<NormalizedProduct ...>, ...]
    """

    def __init__(self, products: Iterable[NormalizedProduct], eshop: Optional[Eshop] = None):
        self.products: List[NormalizedProduct] = list(products)

        if eshop is None and self.products:
            eshop = self.products[0].eshop
        self.eshop = Eshop(eshop) if eshop is not None else None

        buckets: Dict[str, List[NormalizedProduct]] = defaultdict(list)
        for product in self.products:
            # dict.fromkeys keeps order and drops repeated tokens of one name
            for token in dict.fromkeys(product.name_tokens):
                if is_indexable(token):
                    buckets[token].append(product)
        self._buckets = dict(buckets)

        stats = self.stats()
        logger.info(
            f"Indexed {self.label}: {stats['keys']} keys, {stats['references']} references, "
            f"{stats['avg_references_per_key']:.2f} refs/key"
        )

    @property
    def label(self) -> str:
        return self.eshop.value if self.eshop is not None else "<empty>"

    def __len__(self) -> int:
        return len(self.products)

    def __contains__(self, token: str) -> bool:
        return token in self._buckets

    def lookup(self, token: str) -> List[NormalizedProduct]:
        """Products containing the token, or an empty list."""
        return self._buckets.get(token, [])

    def tokens(self) -> List[str]:
        return list(self._buckets)

    def stats(self) -> Dict:
        keys = len(self._buckets)
        references = sum(len(bucket) for bucket in self._buckets.values())
        return {
            'products': len(self.products),
            'keys': keys,
            'references': references,
            'avg_references_per_key': references / keys if keys else 0.0,
            'avg_keys_per_product': keys / len(self.products) if self.products else 0.0,
        }

    def write_mapping_view(self, directory: Path) -> Path:
        """
        Dump one text file per token listing the names of its products.

        Tokens that cannot be used as a file name ("1/2", "50%/") are listed
        in invalid_tokens.txt instead.
        """
        target = Path(directory) / self.label
        target.mkdir(parents=True, exist_ok=True)

        invalid: List[str] = []
        for token, bucket in self._buckets.items():
            if '/' in token or '\\' in token or token in ('.', '..') or '\x00' in token:
                invalid.append(token)
                continue
            try:
                with open(target / f"{token}.txt", 'w', encoding='utf-8') as f:
                    f.write("\n".join(p.name for p in bucket) + "\n")
            except OSError:
                invalid.append(token)

        with open(target / "invalid_tokens.txt", 'w', encoding='utf-8') as f:
            f.write("".join(f"{token}\n" for token in invalid))

        logger.debug(f"Wrote mapping view of {self.label} to {target} ({len(invalid)} invalid tokens)")
        return target
