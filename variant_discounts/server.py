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
Discount Function HTTP Server

This module starts a server that provides:
1. The discount function run endpoint
2. Configuration endpoints used by the admin save path

Usage:
    python -m variant_discounts.server

Or:
    variant-discounts serve
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .constants import Constants
from .routes import configuration_router, function_router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{Constants.SERVICE_NAME} Server",
    description="Per-variant percentage discounts for cart lines",
    version=Constants.SERVICE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(function_router)
app.include_router(configuration_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": Constants.SERVICE_NAME}


def run_server(host: str = Constants.DEFAULT_HOST, port: int = Constants.DEFAULT_PORT):
    """Run the HTTP server."""
    logger.info(f"Starting {Constants.SERVICE_NAME} server on http://{host}:{port}")
    logger.info("Available endpoints:")
    logger.info("  - GET  /health - Health check")
    logger.info("  - POST /discount-function/run - Evaluate cart discounts")
    logger.info("  - POST /configuration - Build configuration metafield")
    logger.info("  - POST /configuration/decode - Decode configuration metafield")
    logger.info("  - POST /configuration/validate - Validate configuration metafield")

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
