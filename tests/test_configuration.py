import json
import logging

import pytest
from pydantic import ValidationError

from variant_discounts.configuration import (
    ConfigurationErrorCode,
    ConfigurationParseError,
    DiscountConfiguration,
    build_configuration,
    build_metafield,
    decode,
    encode,
    merge_configurations,
    parse_configuration,
    validate_configuration,
)
from variant_discounts.constants import Constants


def test_decode_reads_variant_discounts():
    config = decode('{"variantDiscounts": {"v1": 20, "v2": 12.5}}')
    assert config.variant_discounts == {"v1": 20.0, "v2": 12.5}
    assert config.percentage_for("v2") == 12.5


def test_decode_round_trips_serialized_mapping():
    mapping = {"gid://shopify/ProductVariant/1": 15.0, "gid://shopify/ProductVariant/2": 0.5}
    raw = json.dumps({"variantDiscounts": mapping})
    assert decode(raw).variant_discounts == mapping


OVERSIZED_INTEGER = '{"variantDiscounts": {"v1": 1' + "0" * 5000 + "}}"
DEEPLY_NESTED = "[" * 200000


@pytest.mark.parametrize(
    "raw",
    ["not json", "{garbage", "[1, 2]", "42", '"text"', OVERSIZED_INTEGER, DEEPLY_NESTED],
    ids=["text", "truncated", "array", "number", "string", "oversized-integer", "deep-nesting"],
)
def test_decode_degrades_to_empty_on_unreadable_value(raw):
    config = decode(raw)
    assert config.is_empty


def test_decode_logs_unreadable_value(caplog):
    with caplog.at_level(logging.WARNING, logger="variant_discounts.configuration"):
        decode("{garbage")
    assert "invalid_json" in caplog.text


@pytest.mark.parametrize("raw", [None, "", "   ", "{}", '{"other": {"v1": 10}}', '{"variantDiscounts": null}'])
def test_decode_missing_configuration_is_empty_without_warning(raw, caplog):
    with caplog.at_level(logging.WARNING, logger="variant_discounts.configuration"):
        config = decode(raw)
    assert config.is_empty
    assert caplog.records == []


def test_decode_wrong_field_type_is_treated_as_absent(caplog):
    with caplog.at_level(logging.WARNING, logger="variant_discounts.configuration"):
        config = decode('{"variantDiscounts": [["v1", 10]]}')
    assert config.is_empty
    assert "invalid_variant_discounts" in caplog.text


def test_decode_drops_unusable_values():
    raw = json.dumps({
        "variantDiscounts": {
            "ok": 10,
            "zero": 0,
            "negative": -5,
            "string": "15",
            "bool": True,
            "null": None,
            "object": {"value": 10},
        }
    })
    assert decode(raw).variant_discounts == {"ok": 10.0}


def test_decode_drops_non_finite_values():
    # json accepts these literals
    raw = '{"variantDiscounts": {"inf": Infinity, "nan": NaN, "big": 1e400, "ok": 5}}'
    assert decode(raw).variant_discounts == {"ok": 5.0}


@pytest.mark.parametrize("raw", [OVERSIZED_INTEGER, DEEPLY_NESTED], ids=["oversized-integer", "deep-nesting"])
def test_parse_configuration_reports_unparseable_json(raw):
    with pytest.raises(ConfigurationParseError) as exc_info:
        parse_configuration(raw)
    assert exc_info.value.code == ConfigurationErrorCode.INVALID_JSON


def test_parse_configuration_raises_with_code():
    with pytest.raises(ConfigurationParseError) as exc_info:
        parse_configuration("[]")
    assert exc_info.value.code == ConfigurationErrorCode.INVALID_SHAPE


def test_validate_configuration():
    assert validate_configuration('{"variantDiscounts": {}}') == (True, None)
    is_valid, error = validate_configuration("{garbage")
    assert is_valid is False
    assert error.startswith("Invalid JSON")


def test_configuration_is_frozen():
    config = DiscountConfiguration(variant_discounts={"v1": 10})
    with pytest.raises(ValidationError):
        config.variant_discounts = {}


def test_build_configuration_keeps_positive_values_only():
    config = build_configuration({
        "v1": "15",
        "v2": "0",
        "v3": "abc",
        "v4": 7.5,
        "v5": "",
        "v6": "-3",
        "v7": None,
    })
    assert config.variant_discounts == {"v1": 15.0, "v4": 7.5}


def test_encode_produces_metafield_value():
    config = build_configuration({"v1": "20"})
    assert json.loads(encode(config)) == {"variantDiscounts": {"v1": 20.0}}


def test_build_metafield_for_new_and_existing():
    config = build_configuration({"v1": 20})

    created = build_metafield(config)
    assert created.id is None
    assert created.namespace == Constants.METAFIELD_NAMESPACE
    assert created.key == Constants.METAFIELD_KEY
    assert created.type == "json"
    assert decode(created.value).variant_discounts == {"v1": 20.0}

    assert build_metafield(config, "null").id is None
    assert build_metafield(config, "gid://shopify/Metafield/9").id == "gid://shopify/Metafield/9"


def test_merge_configurations_later_values_win():
    merged = merge_configurations([
        '{"variantDiscounts": {"v1": 10, "v2": 5}}',
        "{garbage",
        None,
        '{"variantDiscounts": {"v1": 25}}',
    ])
    assert merged.variant_discounts == {"v1": 25.0, "v2": 5.0}
