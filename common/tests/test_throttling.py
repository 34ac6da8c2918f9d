from cart.views import CartAddItemView
from common.throttling import SettingsScopedRateThrottle


def test_rate_is_read_from_current_settings(settings):
    settings.REST_FRAMEWORK = {
        **settings.REST_FRAMEWORK,
        "DEFAULT_THROTTLE_RATES": {**settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"], "cart_write": "3/min"},
    }
    throttle = SettingsScopedRateThrottle()
    throttle.scope = "cart_write"
    assert throttle.get_rate() == "3/min"


def test_unknown_scope_is_not_throttled():
    throttle = SettingsScopedRateThrottle()
    throttle.scope = "no_such_scope"
    assert throttle.get_rate() is None


def test_ledger_views_declare_write_scope():
    assert CartAddItemView.throttle_scope == "cart_write"
