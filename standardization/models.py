"""
Pydantic Models for Normalized Catalog Files

These models validate the JSON records produced by the e-shop adapters
before they are turned into NormalizedProduct instances.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

from .schema import Eshop, NormalizedProduct, NutritionalValues


# ============================================
# Nutrition
# ============================================

class NutritionalValuesRecord(BaseModel):
    energy_kj: int = Field(..., ge=0)
    energy_kcal: int = Field(..., ge=0)
    fats: Decimal = Field(..., ge=0)
    saturated_fatty_acids: Decimal = Field(..., ge=0)
    carbohydrates: Decimal = Field(..., ge=0)
    sugars: Decimal = Field(..., ge=0)
    proteins: Decimal = Field(..., ge=0)
    salt: Decimal = Field(..., ge=0)
    fibre: Decimal = Field(..., ge=0)

    def to_nutritional_values(self) -> NutritionalValues:
        return NutritionalValues(**self.model_dump())


# ============================================
# Product
# ============================================

class ProductRecord(BaseModel):
    """One normalized product as stored in a catalog file."""
    model_config = ConfigDict(extra='ignore')

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)

    producer: Optional[str] = None
    description: Optional[str] = None
    storage_conditions: Optional[str] = None

    # At most one of these may be present
    pieces: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    volume: Optional[float] = Field(None, ge=0)

    nutritional_values: Optional[NutritionalValuesRecord] = None

    @model_validator(mode='after')
    def single_unit(self) -> 'ProductRecord':
        units = [u for u in (self.pieces, self.weight, self.volume) if u is not None]
        if len(units) > 1:
            raise ValueError("only one of pieces, weight, volume may be set")
        return self

    def to_product(self, eshop: Eshop) -> NormalizedProduct:
        product = NormalizedProduct(
            name=self.name,
            url=self.url,
            price=self.price,
            eshop=eshop,
        )
        product.producer = self.producer
        product.description = self.description
        product.storage_conditions = self.storage_conditions

        if self.pieces is not None:
            product.set_pieces(self.pieces)
        elif self.weight is not None:
            product.set_weight(self.weight)
        elif self.volume is not None:
            product.set_volume(self.volume)

        if self.nutritional_values is not None:
            product.nutritional_values = self.nutritional_values.to_nutritional_values()

        return product


class CatalogFile(RootModel[List[ProductRecord]]):
    """A catalog file is a JSON array of product records."""
