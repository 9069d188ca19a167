import pytest

from planner.formatting import (
    format_amount,
    format_amount_for_chart,
    format_amount_short,
    format_currency,
    format_krw_comma,
    format_krw_monthly,
    format_percent,
    format_y_axis,
    parse_amount,
    parse_chart_amount,
    parse_y_axis,
)


def test_format_amount_splits_eok():
    assert format_amount(12000) == "1억 2,000만원"
    assert format_amount(20000) == "2억원"
    assert format_amount(3500) == "3,500만원"
    assert format_amount("abc") == "0만원"


def test_short_and_chart_labels():
    assert format_amount_short(12000) == "1.2억원"
    assert format_amount_short(5000) == "5.0천만원"
    assert format_amount_short(800) == "800만원"
    assert format_amount_for_chart(12000) == "1.2억"
    assert format_amount_for_chart(4321) == "4.3천"
    assert format_amount_for_chart(800) == "800"
    assert format_amount_for_chart(None) == "0"


@pytest.mark.parametrize("value", [0, 7, 512.5, 999.4, 999.6, 1234, 9999, 12000, 45678, 99999, -3456, -9999])
def test_chart_label_is_stable_after_parsing(value):
    label = format_amount_for_chart(value)

    assert format_amount_for_chart(parse_chart_amount(label)) == label


def test_chart_label_moves_to_larger_unit_when_rounding_overflows():
    assert format_amount_for_chart(9999) == "1.0억"
    assert format_amount_for_chart(999.6) == "1.0천"


def test_y_axis_labels_for_won_values():
    assert format_y_axis(150_000_000) == "1.5억"
    assert format_y_axis(25_000) == "2.5만"
    assert parse_y_axis("1.5억") == 150_000_000


def test_parse_chart_amount_rejects_junk():
    with pytest.raises(ValueError):
        parse_chart_amount("abc")


def test_currency_percent_and_input_helpers():
    assert format_currency(1234) == "₩1,234"
    assert format_currency(-1234) == "-₩1,234"
    assert format_percent("") == "—"
    assert format_percent(4.5) == "4.5%"
    assert format_krw_monthly(15000) == "1억 5,000만원/월"
    assert format_krw_comma("1234567") == "1,234,567"
    assert parse_amount("1,234만원") == 1234
    assert parse_amount(None) == 0
