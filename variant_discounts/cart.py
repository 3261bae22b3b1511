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
Discount Function Input

Models for the input document the platform hands to the discount function
on every cart calculation:

    {
        "cart": {"lines": [{"id": ..., "quantity": 1, "merchandise": {...}}]},
        "discount": {
            "discountClasses": ["PRODUCT"],
            "metafield": {"value": "<serialized configuration>"}
        }
    }

Field names follow the platform's camelCase; Python code uses snake_case.
"""

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator
import logging

logger = logging.getLogger(__name__)


class DiscountClass(str, Enum):
    """Discount classes a discount may be allowed to produce."""
    PRODUCT = "PRODUCT"
    ORDER = "ORDER"
    SHIPPING = "SHIPPING"

    @classmethod
    def _missing_(cls, value):
        # Accept "Product" / "product" as well as the platform's "PRODUCT"
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class InputModel(BaseModel):
    """Base for input models: accepts aliases or field names, ignores extras."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ProductReference(InputModel):
    id: str


class ProductVariant(InputModel):
    """Merchandise that is a product variant; the only kind with a discount."""
    typename: Literal["ProductVariant"] = Field("ProductVariant", alias="__typename")
    id: str = Field(..., description="Variant ID, the configuration key")
    product: Optional[ProductReference] = None


class OtherMerchandise(InputModel):
    """Any merchandise that is not a product variant (e.g. CustomProduct)."""
    typename: Optional[str] = Field(None, alias="__typename")


def _merchandise_tag(value: Any) -> str:
    if isinstance(value, dict):
        typename = value.get("__typename", value.get("typename"))
        if typename is None:
            # Inline fragments leave non-variants as {} without a typename
            return "ProductVariant" if value.get("id") else "Other"
        return "ProductVariant" if typename == "ProductVariant" else "Other"
    return "ProductVariant" if isinstance(value, ProductVariant) else "Other"


Merchandise = Annotated[
    Union[
        Annotated[ProductVariant, Tag("ProductVariant")],
        Annotated[OtherMerchandise, Tag("Other")],
    ],
    Discriminator(_merchandise_tag),
]


class CartLine(InputModel):
    """A line of the cart snapshot."""
    id: str = Field(..., description="Cart line ID, unique within the cart")
    quantity: int = 1
    merchandise: Optional[Merchandise] = None

    @property
    def variant_id(self) -> Optional[str]:
        """Variant ID when the line is a product variant, otherwise None."""
        if isinstance(self.merchandise, ProductVariant):
            return self.merchandise.id
        return None


class Cart(InputModel):
    lines: List[CartLine] = Field(default_factory=list)


class Metafield(InputModel):
    value: Optional[str] = None


class DiscountContext(InputModel):
    """The discount being evaluated: allowed classes and its configuration."""
    discount_classes: List[DiscountClass] = Field(
        default_factory=list,
        alias="discountClasses",
        description="Classes this discount is allowed to produce"
    )
    metafield: Optional[Metafield] = Field(
        None,
        description="function-configuration metafield, absent if never saved"
    )

    @field_validator("discount_classes", mode="before")
    @classmethod
    def _drop_unknown_classes(cls, value: Any) -> Any:
        # Only membership of known classes matters; unknown tags are dropped
        if not isinstance(value, list):
            return value
        known = []
        for tag in value:
            try:
                known.append(DiscountClass(tag))
            except ValueError:
                logger.info(f"Ignoring unknown discount class: {tag!r}")
        return known

    @property
    def configuration_value(self) -> Optional[str]:
        if self.metafield is None:
            return None
        return self.metafield.value


class RunInput(InputModel):
    """Input document of a discount function run."""
    cart: Cart
    discount: DiscountContext = Field(default_factory=DiscountContext)
