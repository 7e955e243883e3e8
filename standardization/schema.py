"""
NormalizedProduct Schema

Common product format every e-shop adapter maps its raw data into.
The matching engine relies only on name, url, price and eshop; the
remaining descriptive fields are carried through for downstream consumers.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from .name_normalizer import tokenize_name, make_file_safe_key


class Eshop(str, Enum):
    """Stores a catalog can come from. Declaration order is the tie-break order."""
    KOSIK = "KOSIK"
    ROHLIK = "ROHLIK"
    TESCO = "TESCO"

    @property
    def order(self) -> int:
        return list(Eshop).index(self)


class UnitType(str, Enum):
    PIECES = "pieces"
    WEIGHT = "weight"
    VOLUME = "volume"
    BOX = "box"
    OTHER = "other"


def _assert_non_negative(label: str, value) -> None:
    if value < 0:
        raise ValueError(f"{label} cannot be negative: {value}")


@dataclass(frozen=True)
class NutritionalValues:
    """Nutrition facts per 100 g."""
    energy_kj: int
    energy_kcal: int
    fats: Decimal
    saturated_fatty_acids: Decimal
    carbohydrates: Decimal
    sugars: Decimal
    proteins: Decimal
    salt: Decimal
    fibre: Decimal

    def __post_init__(self):
        for name in self.__dataclass_fields__:
            _assert_non_negative(name, getattr(self, name))

    def __str__(self) -> str:
        return (
            "Nutritional values per 100 g:\n"
            f"Energy kJ {self.energy_kj}\n"
            f"Energy kcal {self.energy_kcal}\n"
            f"Fats {self.fats}\n"
            f"Saturated fatty acids {self.saturated_fatty_acids}\n"
            f"Carbohydrates {self.carbohydrates}\n"
            f"Sugars {self.sugars}\n"
            f"Proteins {self.proteins}\n"
            f"Salt {self.salt}\n"
            f"Fibre {self.fibre}"
        )


# Fields that are fixed once __post_init__ has run
_IMMUTABLE_FIELDS = frozenset({'name', 'url', 'price', 'eshop', 'name_tokens', 'file_safe_key'})


@dataclass(eq=False)
class NormalizedProduct:
    """
    Normalized product record of one e-shop.

    Required fields are validated at construction, the name tokens and the
    file key are derived once and never recomputed. Records compare by
    identity, so two products with the same name are still two products.

    Example:
        product = NormalizedProduct(
            name="Jablka Gala 1kg",
            url="https://www.kosik.cz/p123",
            price=Decimal("39.90"),
            eshop=Eshop.KOSIK,
        )
        product.set_weight(1.0)
    """

    # === Identity (required) ===
    name: str
    url: str
    price: Decimal
    eshop: Eshop

    # === Descriptive (optional, filled by adapters) ===
    producer: Optional[str] = None
    description: Optional[str] = None
    storage_conditions: Optional[str] = None
    unit_type: Optional[UnitType] = None
    pieces: Optional[int] = None
    weight: Optional[float] = None
    volume: Optional[float] = None
    nutritional_values: Optional[NutritionalValues] = None

    # === Derived ===
    name_tokens: Tuple[str, ...] = field(init=False, repr=False)
    file_safe_key: str = field(init=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Product name cannot be empty: {self.name!r}")
        if not isinstance(self.url, str) or not self.url:
            raise ValueError(f"Product url cannot be empty: {self.url!r}")

        price = self.price if isinstance(self.price, Decimal) else Decimal(str(self.price))
        _assert_non_negative("Price", price)
        self.price = price

        self.eshop = Eshop(self.eshop)
        self.name_tokens = tokenize_name(self.name)
        self.file_safe_key = make_file_safe_key(self.name)
        object.__setattr__(self, '_sealed', True)

    def __setattr__(self, key: str, value: Any) -> None:
        if key in _IMMUTABLE_FIELDS and self.__dict__.get('_sealed'):
            raise AttributeError(f"NormalizedProduct.{key} is read-only")
        object.__setattr__(self, key, value)

    # === Unit classification (settable once) ===

    def _set_unit(self, unit_type: UnitType) -> None:
        if self.unit_type is not None:
            raise ValueError(
                f"Unit type of '{self.name}' already set to {self.unit_type.value}"
            )
        self.unit_type = unit_type

    def set_pieces(self, pieces: int) -> None:
        _assert_non_negative("Pieces", pieces)
        self._set_unit(UnitType.PIECES)
        self.pieces = pieces

    def set_weight(self, weight: float) -> None:
        _assert_non_negative("Weight", weight)
        self._set_unit(UnitType.WEIGHT)
        self.weight = weight

    def set_volume(self, volume: float) -> None:
        _assert_non_negative("Volume", volume)
        self._set_unit(UnitType.VOLUME)
        self.volume = volume

    def __str__(self) -> str:
        lines = [self.name, str(self.price), self.eshop.value, self.url]
        for value in (self.description, self.producer, self.storage_conditions,
                      self.unit_type and self.unit_type.value, self.pieces,
                      self.weight, self.volume, self.nutritional_values):
            if value is not None:
                lines.append(str(value))
        return "\n".join(lines)
