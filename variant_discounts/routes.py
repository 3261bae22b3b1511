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
FastAPI Routes for the Discount Function

Provides HTTP endpoints for running the discount function against a cart and
for building/reading the configuration metafield.
"""

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
import logging

from .cart import RunInput
from .configuration import (
    build_configuration,
    build_metafield,
    decode,
    validate_configuration,
)
from .evaluator import run

logger = logging.getLogger(__name__)

function_router = APIRouter(prefix="/discount-function", tags=["Discount Function"])
configuration_router = APIRouter(prefix="/configuration", tags=["Configuration"])


class ConfigurationSaveRequest(BaseModel):
    """Variant percentages submitted from the admin form."""
    model_config = ConfigDict(populate_by_name=True)

    variant_discounts: Dict[str, Any] = Field(
        default_factory=dict,
        alias="variantDiscounts",
        description="Variant ID -> percentage, as numbers or strings"
    )
    metafield_id: Optional[str] = Field(
        None,
        alias="metafieldId",
        description="Metafield being replaced, if one exists"
    )


class ConfigurationValue(BaseModel):
    """A raw metafield value."""
    value: Optional[str] = None


@function_router.post("/run")
async def run_discount_function(run_input: RunInput):
    """Evaluate the cart and return the discount operations."""
    result = run(run_input)
    logger.info(f"Discount function returned {len(result.operations)} operation(s)")
    return result.to_dict()


@configuration_router.post("")
async def save_configuration(body: ConfigurationSaveRequest):
    """
    Build the metafield input for a merchant save.

    Non-positive and unparseable percentages are dropped so the stored
    configuration only lists active discounts.
    """
    configuration = build_configuration(body.variant_discounts)
    metafield = build_metafield(configuration, body.metafield_id)

    logger.info(
        f"Built configuration with {len(configuration.variant_discounts)} "
        f"of {len(body.variant_discounts)} variant discount(s) active"
    )
    return metafield.model_dump(exclude_none=True)


@configuration_router.post("/decode")
async def decode_configuration(body: ConfigurationValue):
    """Decode a metafield value the way the discount function reads it."""
    return decode(body.value).to_dict()


@configuration_router.post("/validate")
async def validate_configuration_value(body: ConfigurationValue):
    """Report whether a metafield value is readable."""
    is_valid, error = validate_configuration(body.value)
    return {"valid": is_valid, "error": error}
