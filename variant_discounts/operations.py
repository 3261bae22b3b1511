# Copyright 2026 Smart Variant Discounts Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Discount Function Result

Models for the operations returned to the checkout engine:

- productDiscountsAdd: candidates targeting cart lines
- orderDiscountsAdd: candidates targeting the order subtotal

Each operation carries a selection strategy telling the engine how many of
its candidates to apply.
"""

from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class ProductDiscountSelectionStrategy(str, Enum):
    """How many product discount candidates are applied."""
    FIRST = "FIRST"  # Only the first candidate
    ALL = "ALL"      # Every candidate; they target disjoint lines


class OrderDiscountSelectionStrategy(str, Enum):
    """How many order discount candidates are applied."""
    FIRST = "FIRST"
    MAXIMUM = "MAXIMUM"


class OutputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CartLineTarget(OutputModel):
    id: str = Field(..., description="Targeted cart line ID")


class ProductDiscountTarget(OutputModel):
    cart_line: CartLineTarget = Field(..., alias="cartLine")


class OrderSubtotalTarget(OutputModel):
    excluded_cart_line_ids: List[str] = Field(
        default_factory=list,
        alias="excludedCartLineIds"
    )


class OrderDiscountTarget(OutputModel):
    order_subtotal: OrderSubtotalTarget = Field(..., alias="orderSubtotal")


class Percentage(OutputModel):
    value: float = Field(..., description="Percent off, 20 means 20%")


class DiscountValue(OutputModel):
    percentage: Percentage


class ProductDiscountCandidate(OutputModel):
    """One proposed discount over a set of cart lines."""
    message: Optional[str] = Field(None, description="Label shown at checkout")
    targets: List[ProductDiscountTarget]
    value: DiscountValue


class OrderDiscountCandidate(OutputModel):
    message: Optional[str] = None
    targets: List[OrderDiscountTarget]
    value: DiscountValue


class ProductDiscountsAdd(OutputModel):
    candidates: List[ProductDiscountCandidate]
    selection_strategy: ProductDiscountSelectionStrategy = Field(
        ...,
        alias="selectionStrategy"
    )


class OrderDiscountsAdd(OutputModel):
    candidates: List[OrderDiscountCandidate]
    selection_strategy: OrderDiscountSelectionStrategy = Field(
        ...,
        alias="selectionStrategy"
    )


class ProductDiscountsAddOperation(OutputModel):
    product_discounts_add: ProductDiscountsAdd = Field(..., alias="productDiscountsAdd")


class OrderDiscountsAddOperation(OutputModel):
    order_discounts_add: OrderDiscountsAdd = Field(..., alias="orderDiscountsAdd")


DiscountOperation = Union[ProductDiscountsAddOperation, OrderDiscountsAddOperation]


class RunResult(OutputModel):
    """Result document of a discount function run."""
    operations: List[DiscountOperation] = Field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to the platform's camelCase form, excluding None values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Factories
# ============================================================================

def percentage_value(percentage: float) -> DiscountValue:
    return DiscountValue(percentage=Percentage(value=percentage))


def product_candidate(
    message: Optional[str],
    line_ids: List[str],
    percentage: float,
) -> ProductDiscountCandidate:
    """Create a candidate discounting the given cart lines by a percentage."""
    return ProductDiscountCandidate(
        message=message,
        targets=[
            ProductDiscountTarget(cart_line=CartLineTarget(id=line_id))
            for line_id in line_ids
        ],
        value=percentage_value(percentage),
    )


def product_discounts_add(
    candidates: List[ProductDiscountCandidate],
    selection_strategy: ProductDiscountSelectionStrategy = ProductDiscountSelectionStrategy.ALL,
) -> ProductDiscountsAddOperation:
    return ProductDiscountsAddOperation(
        product_discounts_add=ProductDiscountsAdd(
            candidates=candidates,
            selection_strategy=selection_strategy,
        )
    )
