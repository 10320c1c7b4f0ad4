from expense_rollup.functional import (
    Left, Nothing, Right, Some,
    parse_amount, percent_change, percent_difference,
)


def test_maybe_map():
    maybe_value = Some(5)
    doubled = maybe_value.map(lambda x: x * 2)

    assert doubled.is_some()
    assert doubled.get_or_else(0) == 10

    nothing = Nothing()
    mapped_nothing = nothing.map(lambda x: x * 2)
    assert mapped_nothing.is_none()
    assert mapped_nothing.get_or_else(0) == 0


def test_maybe_bind():
    def safe_divide(x):
        if x == 0:
            return Nothing()
        return Some(10 // x)

    assert Some(2).bind(safe_divide).get_or_else(0) == 5
    assert Some(0).bind(safe_divide).is_none()
    assert Nothing().bind(safe_divide).is_none()


def test_either_map_and_error():
    assert Right(5).map(lambda x: x * 2).get_or_else(0) == 10

    left_value = Left("error")
    mapped_left = left_value.map(lambda x: x * 2)
    assert mapped_left.is_left()
    assert mapped_left.get_or_else(0) == 0
    assert mapped_left.get_error() == "error"


def test_parse_amount_strips_currency_formatting():
    assert parse_amount("$1,234.56") == Some(1234.56)
    assert parse_amount("  $12.00 ") == Some(12.0)
    assert parse_amount("-$50.00") == Some(-50.0)
    assert parse_amount("2,000") == Some(2000.0)


def test_parse_amount_passes_numbers_through():
    assert parse_amount(100) == Some(100.0)
    assert parse_amount(-3.5) == Some(-3.5)


def test_parse_amount_unparsable_is_nothing():
    assert parse_amount("abc").is_none()
    assert parse_amount("").is_none()
    assert parse_amount("$").is_none()
    assert parse_amount(None).is_none()
    assert parse_amount(float("nan")).is_none()
    assert parse_amount(True).is_none()


def test_percent_change_zero_baseline():
    assert percent_change(0, 100).is_none()
    assert percent_change(0, 0).is_none()
    assert percent_change(200, 300) == Some(50.0)


def test_percent_difference_formatting():
    assert percent_difference(0, 42) == "N/A"
    assert percent_difference(100, 100) == "+0.0%"
    assert percent_difference(100, 150) == "+50.0%"
    assert percent_difference(100, 50) == "-50.0%"
    assert percent_difference(-100, -50) == "+50.0%"
    assert percent_difference(3, 4) == "+33.3%"
