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
Discount Function MCP Binding

Tools implemented:
- evaluate_cart_discounts: Runs the discount function on an input document
- build_discount_configuration: Builds the configuration metafield from form values
- decode_discount_configuration: Reads a configuration metafield value
"""

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError
import logging
from typing import Any, Dict, Optional

from ..configuration import (
    build_configuration,
    build_metafield,
    decode,
    validate_configuration,
)
from ..constants import Constants
from ..evaluator import run_json

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


mcp = FastMCP(
    "Variant_Discounts_MCP_Server",
    host=Constants.DEFAULT_HOST,
    port=Constants.MCP_PORT,
    stateless_http=True,
)


# ============================================================================
# Helper Functions
# ============================================================================

def _create_error_response(code: str, message: str, severity: str = "recoverable", details: Dict = None) -> Dict:
    """Creates an error response with a code, message and severity."""
    return {
        "status": "error",
        "errors": [
            {
                "code": code,
                "message": message,
                "severity": severity,
                "details": details or {}
            }
        ]
    }


# ============================================================================
# MCP Tools
# ============================================================================

@mcp.tool("evaluate_cart_discounts")
def evaluate_cart_discounts(run_input: Dict[str, Any]) -> Dict:
    """
    Runs the discount function on a cart.

    Args:
        run_input: Input document with "cart" (lines with id and merchandise)
            and "discount" (discountClasses and the configuration metafield)

    Returns:
        dict: Result document with the discount operations, or error response
    """
    try:
        result = run_json(run_input)
    except ValidationError as e:
        logger.info(f"evaluate_cart_discounts rejected input: {e.error_count()} error(s)")
        return _create_error_response(
            code="INVALID_INPUT",
            message="Input is not a valid discount function input",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)}
        )

    logger.info(f"evaluate_cart_discounts returned {len(result['operations'])} operation(s)")
    return result


@mcp.tool("build_discount_configuration")
def build_discount_configuration(
    variant_discounts: Dict[str, Any],
    metafield_id: Optional[str] = None,
) -> Dict:
    """
    Builds the configuration metafield for a merchant save.

    Args:
        variant_discounts: Variant ID -> percentage (numbers or strings)
        metafield_id: Metafield being replaced, if one exists

    Returns:
        dict: Metafield input with namespace, key, type and value
    """
    configuration = build_configuration(variant_discounts)
    return build_metafield(configuration, metafield_id).model_dump(exclude_none=True)


@mcp.tool("decode_discount_configuration")
def decode_discount_configuration(value: Optional[str] = None) -> Dict:
    """
    Reads a configuration metafield value.

    Args:
        value: The raw metafield value

    Returns:
        dict: The decoded variantDiscounts plus whether the value was readable
    """
    is_valid, error = validate_configuration(value)
    result = decode(value).to_dict()
    result["valid"] = is_valid
    if error:
        result["error"] = error
    return result


if __name__ == "__main__":
    print(f"Starting Variant Discounts MCP Server on http://{Constants.DEFAULT_HOST}:{Constants.MCP_PORT}")
    print("Supported tools: evaluate_cart_discounts, build_discount_configuration, decode_discount_configuration")
    mcp.run(transport="streamable-http")
