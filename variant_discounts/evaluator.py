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
Cart Lines Discount Evaluation

Runs once per cart calculation. Every cart line whose variant has a
configured percentage is discounted by it:

1. Resolve each line's percentage from the variant configuration
2. Group the discounted lines by percentage, in cart order
3. Emit one candidate per percentage ("20% OFF") inside a single
   productDiscountsAdd operation applying ALL candidates

Evaluation is a pure function of the cart, the configuration and the
enabled discount classes. An empty cart yields no operations.
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence
import logging

from .cart import CartLine, DiscountClass, ProductVariant, RunInput
from .configuration import DiscountConfiguration, decode
from .constants import Constants
from .operations import (
    DiscountOperation,
    ProductDiscountCandidate,
    ProductDiscountSelectionStrategy,
    RunResult,
    product_candidate,
    product_discounts_add,
)

logger = logging.getLogger(__name__)


def format_percentage(percentage: float) -> str:
    """Render a percentage in fixed point, without a trailing .0 for whole numbers."""
    if float(percentage).is_integer():
        return str(int(percentage))
    return format(Decimal(repr(float(percentage))), "f")


def discount_message(percentage: float) -> str:
    return f"{format_percentage(percentage)}{Constants.DISCOUNT_MESSAGE_SUFFIX}"


def resolve_percentage(line: CartLine, configuration: DiscountConfiguration) -> float:
    """Percentage applying to a cart line; 0 for anything but a configured variant."""
    if not isinstance(line.merchandise, ProductVariant):
        return 0.0
    return configuration.percentage_for(line.merchandise.id)


def group_lines_by_percentage(
    lines: Iterable[CartLine],
    configuration: DiscountConfiguration,
) -> Dict[float, List[str]]:
    """
    Group discounted cart lines by their exact percentage.

    Args:
        lines: Cart lines in cart order
        configuration: Decoded variant configuration

    Returns:
        Percentage -> line IDs, keyed in order of first occurrence with
        lines kept in cart order. Lines without a positive percentage are
        left out.
    """
    groups: Dict[float, List[str]] = {}
    for line in lines:
        percentage = resolve_percentage(line, configuration)
        if percentage <= 0:
            continue
        groups.setdefault(percentage, []).append(line.id)
    return groups


def build_candidates(groups: Dict[float, List[str]]) -> List[ProductDiscountCandidate]:
    return [
        product_candidate(discount_message(percentage), line_ids, percentage)
        for percentage, line_ids in groups.items()
    ]


def evaluate(
    lines: Sequence[CartLine],
    configuration: DiscountConfiguration,
    discount_classes: Iterable[DiscountClass],
) -> List[DiscountOperation]:
    """
    Compute the discount operations for a cart.

    Args:
        lines: The cart lines
        configuration: Decoded variant configuration
        discount_classes: Classes the discount is allowed to produce

    Returns:
        At most one productDiscountsAdd operation; empty when nothing applies
    """
    if not lines:
        logger.debug("Cart has no lines, no discounts")
        return []

    classes = set(discount_classes)
    if DiscountClass.PRODUCT not in classes and DiscountClass.ORDER not in classes:
        logger.debug(f"No product or order discount class enabled: {sorted(c.value for c in classes)}")
        return []

    groups = group_lines_by_percentage(lines, configuration)
    if not groups:
        return []

    # Configuration only holds per-line percentages, so there is no
    # order-level rule to apply when PRODUCT is not enabled.
    if DiscountClass.PRODUCT not in classes:
        logger.debug("Product discount class not enabled, skipping line discounts")
        return []

    candidates = build_candidates(groups)
    logger.info(
        f"Discounting {sum(len(ids) for ids in groups.values())} of {len(lines)} "
        f"cart line(s) across {len(candidates)} percentage(s)"
    )
    return [
        product_discounts_add(candidates, ProductDiscountSelectionStrategy.ALL)
    ]


def run(run_input: RunInput) -> RunResult:
    """
    Discount function entry point.

    Decodes the configuration metafield carried by the input and evaluates
    the cart against it.
    """
    configuration = decode(run_input.discount.configuration_value)
    operations = evaluate(
        run_input.cart.lines,
        configuration,
        run_input.discount.discount_classes,
    )
    return RunResult(operations=operations)


def run_json(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run the discount function on a raw input document.

    Args:
        document: Input document as received from the platform

    Returns:
        The result document, camelCase keys

    Raises:
        pydantic.ValidationError: If the document is not a valid input
    """
    run_input = RunInput.model_validate(document)
    return run(run_input).to_dict()
