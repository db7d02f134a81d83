from lendinghub.formatting import format_currency, format_currency_with_cents, format_percent


def test_currency_whole_dollars():
    assert format_currency(1916.96) == "$1,917"
    assert format_currency(1234.5) == "$1,235"
    assert format_currency(0) == "$0"
    assert format_currency(-1234.4) == "-$1,234"
    assert format_currency(1250000) == "$1,250,000"


def test_currency_with_cents():
    assert format_currency_with_cents(1234.564) == "$1,234.56"
    assert format_currency_with_cents(5) == "$5.00"
    assert format_currency_with_cents(-0.5) == "-$0.50"


def test_percent_three_decimals():
    assert format_percent(6.5) == "6.500%"
    assert format_percent(78.33333) == "78.333%"
    assert format_percent(20) == "20.000%"
