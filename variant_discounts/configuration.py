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
Variant Discount Configuration

This module owns the merchant's discount configuration as it is stored in the
function-configuration metafield:

    {"variantDiscounts": {"gid://shopify/ProductVariant/1": 20, ...}}

Two directions are covered:
- Decoding: the discount function reads the metafield value at checkout.
  Malformed values never fail checkout, they degrade to "no discounts".
- Encoding: the admin save path consolidates form values into a new
  configuration and builds the metafield input that replaces the old one.
"""

import json
import logging
import math
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from .constants import Constants

logger = logging.getLogger(__name__)


class ConfigurationErrorCode(str, Enum):
    """Error codes for unreadable configuration values."""
    INVALID_JSON = "invalid_json"
    INVALID_SHAPE = "invalid_shape"
    INVALID_VARIANT_DISCOUNTS = "invalid_variant_discounts"


class ConfigurationParseError(ValueError):
    """Raised by the strict parser when a metafield value is unusable."""

    def __init__(self, code: ConfigurationErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class DiscountConfiguration(BaseModel):
    """
    Per-variant discount percentages.

    Every value is a finite, strictly positive percent (20 means 20%).
    Anything else was dropped when the configuration was built.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    variant_discounts: Dict[str, float] = Field(
        default_factory=dict,
        alias=Constants.VARIANT_DISCOUNTS_FIELD,
        description="Variant ID -> discount percentage"
    )

    def percentage_for(self, variant_id: str) -> float:
        """Percentage configured for a variant, 0 when absent."""
        return self.variant_discounts.get(variant_id, 0.0)

    @property
    def is_empty(self) -> bool:
        return not self.variant_discounts

    def to_dict(self) -> dict:
        """Serializable form, as stored in the metafield."""
        return self.model_dump(by_alias=True)


class MetafieldInput(BaseModel):
    """Metafield written by the admin save path."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Existing metafield ID on update")
    namespace: str = Constants.METAFIELD_NAMESPACE
    key: str = Constants.METAFIELD_KEY
    type: str = Constants.METAFIELD_TYPE
    value: str = Field(..., description="Serialized DiscountConfiguration")


def _is_usable_percentage(value: Any) -> bool:
    # bool is an int subclass but never a percentage
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        value = float(value)
    except OverflowError:
        return False
    return math.isfinite(value) and value > 0


def _usable_entries(entries: Mapping[str, Any]) -> Dict[str, float]:
    usable = {}
    for variant_id, value in entries.items():
        if _is_usable_percentage(value):
            usable[variant_id] = float(value)
        else:
            logger.debug(f"Ignoring discount for {variant_id}: {value!r}")
    return usable


# ============================================================================
# Decoding (checkout side)
# ============================================================================

def parse_configuration(raw: Optional[str]) -> DiscountConfiguration:
    """
    Strictly parse a metafield value.

    Args:
        raw: The metafield value, or None when the metafield is absent

    Returns:
        The validated configuration (empty when raw is blank or the
        variantDiscounts field is absent)

    Raises:
        ConfigurationParseError: If raw is not JSON, not an object, or
            variantDiscounts is not an object
    """
    if raw is None or not raw.strip():
        return DiscountConfiguration()

    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; oversized integers and deep
        # nesting raise ValueError and RecursionError directly
        raise ConfigurationParseError(
            ConfigurationErrorCode.INVALID_JSON,
            f"Invalid JSON: {e}"
        )

    if not isinstance(payload, dict):
        raise ConfigurationParseError(
            ConfigurationErrorCode.INVALID_SHAPE,
            f"Expected a JSON object, got {type(payload).__name__}"
        )

    entries = payload.get(Constants.VARIANT_DISCOUNTS_FIELD)
    if entries is None:
        return DiscountConfiguration()

    if not isinstance(entries, dict):
        raise ConfigurationParseError(
            ConfigurationErrorCode.INVALID_VARIANT_DISCOUNTS,
            f"{Constants.VARIANT_DISCOUNTS_FIELD} must be an object, "
            f"got {type(entries).__name__}"
        )

    return DiscountConfiguration(variant_discounts=_usable_entries(entries))


def decode(raw: Optional[str]) -> DiscountConfiguration:
    """
    Decode a metafield value for a discount evaluation.

    Never raises: an unreadable value is logged and treated as
    "no discounts configured".
    """
    try:
        return parse_configuration(raw)
    except ConfigurationParseError as e:
        logger.warning(f"Discarding discount configuration ({e.code.value}): {e.message}")
        return DiscountConfiguration()


def validate_configuration(raw: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a metafield value.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        parse_configuration(raw)
        return True, None
    except ConfigurationParseError as e:
        return False, e.message


def merge_configurations(raws: Iterable[Optional[str]]) -> DiscountConfiguration:
    """
    Merge the configurations stored on several discount nodes.

    Later values win for a variant present in more than one of them.

    Args:
        raws: Metafield values, oldest first

    Returns:
        The consolidated configuration
    """
    merged: Dict[str, float] = {}
    for raw in raws:
        merged.update(decode(raw).variant_discounts)
    return DiscountConfiguration(variant_discounts=merged)


# ============================================================================
# Encoding (admin save side)
# ============================================================================

def _parse_form_value(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def build_configuration(values: Mapping[str, Any]) -> DiscountConfiguration:
    """
    Consolidate submitted form values into a configuration.

    Form values arrive as strings or numbers. Only values that parse to a
    positive percentage are kept; clearing a field (0 or empty) removes the
    variant's discount.

    Args:
        values: Variant ID -> submitted percentage

    Returns:
        The configuration that replaces the stored one
    """
    active = {}
    for variant_id, value in values.items():
        percentage = _parse_form_value(value)
        if percentage is not None and _is_usable_percentage(percentage):
            active[variant_id] = percentage
    return DiscountConfiguration(variant_discounts=active)


def encode(configuration: DiscountConfiguration) -> str:
    """Serialize a configuration to its metafield value."""
    return json.dumps(configuration.to_dict())


def build_metafield(
    configuration: DiscountConfiguration,
    metafield_id: Optional[str] = None,
) -> MetafieldInput:
    """
    Build the metafield input for a save.

    Args:
        configuration: The configuration to store
        metafield_id: ID of the metafield being replaced, if any

    Returns:
        MetafieldInput carrying the serialized configuration
    """
    # Form posts send the literal string "null" for a missing ID
    if metafield_id == "null" or not metafield_id:
        metafield_id = None

    return MetafieldInput(id=metafield_id, value=encode(configuration))
