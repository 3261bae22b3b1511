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
Discount Function MCP Server Package

Exposes the discount function to agents over MCP (Model Context Protocol):
- evaluate_cart_discounts: Runs the discount function on an input document
- build_discount_configuration: Builds the configuration metafield from form values
- decode_discount_configuration: Reads a configuration metafield value
"""

from .streamable_http_server import (
    mcp,
    evaluate_cart_discounts,
    build_discount_configuration,
    decode_discount_configuration,
)

__all__ = [
    "mcp",
    "evaluate_cart_discounts",
    "build_discount_configuration",
    "decode_discount_configuration",
]
