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

from dataclasses import dataclass
@dataclass
class Constants:

    # Metafield holding the serialized configuration
    METAFIELD_NAMESPACE = "$app:smart-variant-discounts"
    METAFIELD_KEY = "function-configuration"
    METAFIELD_TYPE = "json"
    VARIANT_DISCOUNTS_FIELD = "variantDiscounts"

    DISCOUNT_MESSAGE_SUFFIX = "% OFF"

    SERVICE_NAME = "Smart Variant Discounts"
    SERVICE_VERSION = "2026-01-11"
    DEFAULT_HOST = "localhost"
    DEFAULT_PORT = 10998
    MCP_PORT = 10999
