import json
import logging

from config.logging import JsonFormatter, SamplingFilter


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord("storefront.cart", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extra_fields():
    line = JsonFormatter().format(_record("cart.item_added", event="cart.item_added", cart_id=3, product_ref="42"))
    payload = json.loads(line)
    assert payload["message"] == "cart.item_added"
    assert payload["level"] == "INFO"
    assert payload["name"] == "storefront.cart"
    assert payload["cart_id"] == 3
    assert payload["product_ref"] == "42"
    assert payload["time"].endswith("Z")


def test_json_formatter_stringifies_unserializable_extra():
    payload = json.loads(JsonFormatter().format(_record("x", obj=object())))
    assert payload["obj"].startswith("<object object")


def test_sampling_filter_keeps_allowed_events_and_other_levels():
    drop_all = SamplingFilter(rate=0.0, levels=["INFO"], allow_events=["order.placed"])
    assert drop_all.filter(_record("order.placed")) is True
    assert drop_all.filter(_record("cart.item_added", event="cart.item_added")) is False
    assert drop_all.filter(_record("cart.merge_item_skipped", level=logging.WARNING)) is True
    assert SamplingFilter(rate=1.0).filter(_record("cart.item_added")) is True
