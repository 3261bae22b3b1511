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
Variant Discounts CLI - Command line interface to the discount function.

Usage:
    variant-discounts --help
    variant-discounts run --input input.json
    variant-discounts encode-config -d gid://shopify/ProductVariant/1=20
    variant-discounts serve
"""

import json
import sys
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from variant_discounts.configuration import (
    build_configuration,
    build_metafield,
    encode,
    parse_configuration,
    ConfigurationParseError,
)
from variant_discounts.constants import Constants
from variant_discounts.evaluator import run_json


def print_header(title: str):
    """Print a header with borders."""
    border = "=" * (len(title) + 4)
    click.echo(f"\n{border}")
    click.echo(f"| {title} |")
    click.echo(f"{border}\n")


def print_error(msg: str):
    click.echo(f"[ERROR] {msg}", err=True)


def print_info(msg: str):
    click.echo(f"[INFO] {msg}", err=True)


def parse_discount_option(value: str) -> Tuple[str, str]:
    """Split a VARIANT=PERCENT option on the last '='; the percentage may not contain '='."""
    if "=" not in value:
        raise click.BadParameter(f"expected VARIANT=PERCENT, got '{value}'")
    variant_id, percentage = value.rsplit("=", 1)
    if not variant_id:
        raise click.BadParameter(f"missing variant ID in '{value}'")
    return variant_id, percentage


@click.group()
def cli():
    """Smart Variant Discounts CLI"""
    pass


@cli.command()
@click.option(
    "--input", "-i", "input_file",
    type=click.File("r"),
    default="-",
    help="Input document (JSON); reads stdin by default",
)
@click.option("--pretty", is_flag=True, help="Indent the result document")
def run(input_file, pretty: bool):
    """Run the discount function on an input document."""
    try:
        document = json.load(input_file)
    except json.JSONDecodeError as e:
        print_error(f"Input is not valid JSON: {e}")
        sys.exit(1)

    try:
        result = run_json(document)
    except ValidationError as e:
        print_error(f"Input is not a valid discount function input:\n{e}")
        sys.exit(1)

    click.echo(json.dumps(result, indent=2 if pretty else None))


@cli.command("encode-config")
@click.option(
    "--discount", "-d", "discounts",
    multiple=True,
    metavar="VARIANT=PERCENT",
    help="Discount for a variant; repeat for several variants",
)
@click.option("--metafield-id", default=None, help="Metafield being replaced")
@click.option("--metafield", "as_metafield", is_flag=True, help="Print the full metafield input")
def encode_config(discounts: Tuple[str, ...], metafield_id: Optional[str], as_metafield: bool):
    """Build the configuration metafield value."""
    values = dict(parse_discount_option(d) for d in discounts)
    configuration = build_configuration(values)

    dropped = len(values) - len(configuration.variant_discounts)
    if dropped:
        print_info(f"Dropped {dropped} variant(s) without a positive percentage")

    if as_metafield:
        metafield = build_metafield(configuration, metafield_id)
        click.echo(json.dumps(metafield.model_dump(exclude_none=True)))
    else:
        click.echo(encode(configuration))


@cli.command("decode-config")
@click.argument("raw")
def decode_config(raw: str):
    """Decode a configuration metafield value."""
    try:
        configuration = parse_configuration(raw)
    except ConfigurationParseError as e:
        print_error(f"{e.code.value}: {e.message}")
        sys.exit(1)

    click.echo(json.dumps(configuration.to_dict()))


@cli.command()
@click.option("--host", default=Constants.DEFAULT_HOST, envvar="VARIANT_DISCOUNTS_HOST", show_default=True)
@click.option("--port", default=Constants.DEFAULT_PORT, envvar="VARIANT_DISCOUNTS_PORT", type=int, show_default=True)
def serve(host: str, port: int):
    """Start the HTTP server."""
    from variant_discounts.server import run_server

    print_header(f"Starting {Constants.SERVICE_NAME} Server")
    click.echo(f"URL: http://{host}:{port}")
    click.echo("Press Ctrl+C to stop\n")
    run_server(host=host, port=port)


@cli.command("mcp")
def mcp_server():
    """Start the MCP server."""
    from variant_discounts.mcp_server.streamable_http_server import mcp

    print_header("Starting MCP Server")
    click.echo(f"URL: http://{Constants.DEFAULT_HOST}:{Constants.MCP_PORT}")
    click.echo("Press Ctrl+C to stop\n")
    mcp.run(transport="streamable-http")


if __name__ == "__main__":
    cli()
