import json


def variant_line(line_id: str, variant_id: str, quantity: int = 1) -> dict:
    return {
        "id": line_id,
        "quantity": quantity,
        "merchandise": {"__typename": "ProductVariant", "id": variant_id},
    }


def custom_line(line_id: str) -> dict:
    return {
        "id": line_id,
        "quantity": 1,
        "merchandise": {"__typename": "CustomProduct"},
    }


def make_input(lines, variant_discounts=None, discount_classes=("PRODUCT",), raw=None) -> dict:
    """Build a discount function input document."""
    if raw is None and variant_discounts is not None:
        raw = json.dumps({"variantDiscounts": variant_discounts})
    discount = {"discountClasses": list(discount_classes)}
    if raw is not None:
        discount["metafield"] = {"value": raw}
    return {"cart": {"lines": list(lines)}, "discount": discount}
