import pytest

from variant_discounts.cart import CartLine

from helpers import make_input, variant_line


@pytest.fixture
def lines_factory():
    """Builds CartLine models from (line_id, variant_id) pairs."""
    def _make(*pairs):
        return [CartLine.model_validate(variant_line(line_id, variant_id)) for line_id, variant_id in pairs]
    return _make


@pytest.fixture
def scenario_a_input():
    """Three lines: v1 and v2 at 20%, v3 unconfigured."""
    return make_input(
        [
            variant_line("gid://shopify/CartLine/1", "v1"),
            variant_line("gid://shopify/CartLine/2", "v2"),
            variant_line("gid://shopify/CartLine/3", "v3"),
        ],
        variant_discounts={"v1": 20, "v2": 20},
    )
