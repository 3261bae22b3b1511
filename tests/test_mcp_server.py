import json

from variant_discounts.evaluator import run_json
from variant_discounts.mcp_server import (
    build_discount_configuration,
    decode_discount_configuration,
    evaluate_cart_discounts,
)


def test_evaluate_cart_discounts_matches_function_result(scenario_a_input):
    assert evaluate_cart_discounts(scenario_a_input) == run_json(scenario_a_input)


def test_evaluate_cart_discounts_reports_invalid_input():
    result = evaluate_cart_discounts({"cart": {"lines": "nope"}})
    assert result["status"] == "error"
    error = result["errors"][0]
    assert error["code"] == "INVALID_INPUT"
    assert error["severity"] == "recoverable"
    assert error["details"]["errors"]


def test_build_discount_configuration():
    metafield = build_discount_configuration({"v1": "12.5", "v2": "abc"}, metafield_id="gid://shopify/Metafield/1")
    assert metafield["id"] == "gid://shopify/Metafield/1"
    assert json.loads(metafield["value"]) == {"variantDiscounts": {"v1": 12.5}}


def test_decode_discount_configuration():
    ok = decode_discount_configuration('{"variantDiscounts": {"v1": 10}}')
    assert ok == {"variantDiscounts": {"v1": 10.0}, "valid": True}

    bad = decode_discount_configuration("{garbage")
    assert bad["variantDiscounts"] == {}
    assert bad["valid"] is False
    assert bad["error"].startswith("Invalid JSON")
