import logging

import pytest

from cron_builder.core.build.cron_builder import CronBuilder
from cron_builder.core.config.build_options import BuildOptions
from cron_builder.core.errors import (
    InvalidFieldError,
    InvalidInputError,
    InvalidSyntaxError,
    RangeHighOutOfBoundsError,
    TooManyFieldsError,
    ValueAboveMaximumError,
)
from cron_builder.core.model import FIELDS


class FakeConverter:
    def __init__(self, expanded=None, compacted="compacted"):
        self.expanded = expanded or [[0], [1], [2], [3], [4]]
        self.compacted = compacted
        self.expand_calls: list[str] = []
        self.compact_calls: list[tuple[str, dict]] = []

    def expand(self, cron_string):
        self.expand_calls.append(cron_string)
        return self.expanded

    def compact(self, cron_string, **flags):
        self.compact_calls.append((cron_string, flags))
        return self.compacted


def _builder(expression=None, converter=None):
    return CronBuilder(expression, converter=converter or FakeConverter())


def test_defaults_to_wildcards():
    cron = _builder()
    for name in FIELDS:
        assert cron.get(name) == "*"
    assert cron.build() == "* * * * *"
    assert str(cron) == "* * * * *"


def test_empty_string_means_defaults():
    assert _builder("").build() == "* * * * *"


def test_default_fields_do_not_share_a_list():
    cron = _builder()
    cron.add_value("minute", "5")
    cron.add_value("minute", "10")
    assert cron.get("hour") == "*"
    assert cron.get_all()["hour"] == ["*"]


def test_init_splits_comma_values():
    cron = _builder("0,15,30,45 * * * *")
    assert cron.get_all()["minute"] == ["0", "15", "30", "45"]


def test_init_fills_missing_fields():
    cron = _builder("5 4")
    assert cron.build() == "5 4 * * *"


def test_init_round_trips_plain_string():
    for expression in ["10,30,50 6,18 1,15 * 1-5", "0 0 1 1 0", "50-10 * * * 7", "*/5 * * * *"]:
        assert _builder(expression).build() == expression


def test_init_rejects_invalid_string():
    with pytest.raises(TooManyFieldsError):
        _builder("* * * * * *")
    with pytest.raises(ValueAboveMaximumError):
        _builder("* 25 * * *")


def test_set_single_and_multiple_values():
    cron = _builder()
    assert cron.set("hour", ["5"]) == "5"
    assert cron.build() == "* 5 * * *"
    assert cron.set("minute", ["0", "10", "20", "30", "40", "50"]) == "0,10,20,30,40,50"
    assert cron.build() == "0,10,20,30,40,50 5 * * *"


def test_set_then_get_round_trips_for_every_field():
    values = {
        "minute": ["0", "30"],
        "hour": ["6", "18"],
        "dayOfTheMonth": ["1", "15"],
        "month": ["1-6"],
        "dayOfTheWeek": ["5-7"],
    }
    cron = _builder()
    for name, tokens in values.items():
        cron.set(name, tokens)
        assert cron.get(name) == ",".join(tokens)
    assert cron.build() == "0,30 6,18 1,15 1-6 5-7"


def test_set_accepts_alias():
    cron = _builder()
    cron.set("day_of_the_week", ["1-5"])
    assert cron.get("dayOfTheWeek") == "1-5"


def test_set_rejects_illegal_values():
    cron = _builder()
    with pytest.raises(InvalidSyntaxError):
        cron.set("hour", ["!"])
    with pytest.raises(RangeHighOutOfBoundsError):
        cron.set("dayOfTheWeek", ["-1"])
    with pytest.raises(ValueAboveMaximumError):
        cron.set("hour", ["100"])
    with pytest.raises(RangeHighOutOfBoundsError):
        cron.set("minute", ["20-60"])
    assert cron.build() == "* * * * *"


def test_set_is_all_or_nothing():
    cron = _builder()
    cron.set("hour", ["1"])
    with pytest.raises(RangeHighOutOfBoundsError):
        cron.set("hour", ["12", "22-26", "15"])
    assert cron.get("hour") == "1"


def test_set_rejects_non_list():
    cron = _builder()
    with pytest.raises(InvalidInputError) as exc:
        cron.set("minute", "5")
    assert exc.value.code == "E_INVALID_INPUT"


def test_set_unknown_field():
    with pytest.raises(InvalidFieldError):
        _builder().set("minutes", ["5"])


def test_set_empty_list_resets_to_default():
    cron = _builder("5 * * * *")
    assert cron.set("minute", []) == "*"


def test_set_copies_the_callers_list():
    cron = _builder()
    tokens = ["1", "2"]
    cron.set("hour", tokens)
    tokens.append("3")
    assert cron.get("hour") == "1,2"


def test_get_unknown_field():
    with pytest.raises(InvalidFieldError):
        _builder().get("fortnight")


def test_get_all_returns_a_copy():
    cron = _builder()
    snapshot = cron.get_all()
    snapshot["hour"].append("5")
    snapshot["minute"] = ["30"]
    assert cron.build() == "* * * * *"


def test_set_all_applies_a_modified_snapshot():
    cron = _builder()
    snapshot = cron.get_all()
    snapshot["hour"] = ["13"]
    snapshot["month"] = ["1-6"]
    snapshot["dayOfTheWeek"] = ["1,3,5,7"]
    cron.set_all(snapshot)
    assert cron.build() == "* 13 * 1-6 1,3,5,7"


def test_set_all_missing_and_empty_fields_become_default():
    cron = _builder("1 2 3 4 5")
    cron.set_all({"hour": ["8"], "month": []})
    assert cron.build() == "* 8 * * *"


def test_set_all_failure_leaves_state_untouched():
    cron = _builder("0 12 * * 1")
    snapshot = cron.get_all()
    snapshot["minute"] = ["15"]
    snapshot["hour"] = ["28"]
    with pytest.raises(ValueAboveMaximumError):
        cron.set_all(snapshot)
    assert cron.build() == "0 12 * * 1"


def test_set_all_rejects_too_many_fields():
    cron = _builder()
    snapshot = cron.get_all()
    snapshot["year"] = ["2025"]
    with pytest.raises(TooManyFieldsError):
        cron.set_all(snapshot)


def test_add_value_replaces_default():
    cron = _builder()
    cron.add_value("minute", "5")
    assert cron.get("minute") == "5"
    assert cron.build() == "5 * * * *"


def test_add_value_appends_in_order():
    cron = _builder()
    cron.add_value("hour", "5")
    cron.add_value("hour", "10")
    assert cron.get("hour") == "5,10"


def test_add_value_ignores_duplicates(caplog):
    cron = _builder()
    cron.add_value("dayOfTheMonth", "5")
    cron.add_value("dayOfTheMonth", "15")
    with caplog.at_level(logging.DEBUG, logger="cron_builder.core.build.cron_builder"):
        cron.add_value("dayOfTheMonth", "5")
    assert cron.get("dayOfTheMonth") == "5,15"
    assert "no-op" in caplog.text


def test_add_value_validates():
    cron = _builder()
    with pytest.raises(ValueAboveMaximumError):
        cron.add_value("month", "13")
    with pytest.raises(InvalidFieldError):
        cron.add_value("year", "2025")
    assert cron.build() == "* * * * *"


def test_remove_value():
    cron = _builder()
    cron.add_value("dayOfTheMonth", "5")
    cron.add_value("dayOfTheMonth", "15")
    cron.add_value("dayOfTheMonth", "25")
    cron.remove_value("dayOfTheMonth", "15")
    assert cron.get("dayOfTheMonth") == "5,25"


def test_remove_last_value_resets_to_default():
    cron = _builder()
    cron.add_value("minute", "5")
    cron.remove_value("minute", "5")
    assert cron.get("minute") == "*"
    cron.add_value("minute", "7")
    assert cron.get("minute") == "7"


def test_remove_value_from_default_is_a_logged_noop(caplog):
    cron = _builder()
    with caplog.at_level(logging.INFO, logger="cron_builder.core.build.cron_builder"):
        cron.remove_value("hour", "5")
    assert cron.get("hour") == "*"
    assert "already the default" in caplog.text


def test_remove_value_missing_value_is_harmless():
    cron = _builder("5 * * * *")
    cron.remove_value("minute", "6")
    assert cron.get("minute") == "5"


def test_remove_value_unknown_field():
    with pytest.raises(InvalidFieldError):
        _builder().remove_value("week", "1")


def test_build_compact_delegates_to_converter():
    converter = FakeConverter(compacted="*/10 * * * *")
    cron = _builder(converter=converter)
    cron.set("minute", ["0", "10", "20", "30", "40", "50"])

    assert cron.build(plain=False, output_month_names=True) == "*/10 * * * *"
    assert converter.compact_calls == [
        (
            "0,10,20,30,40,50 * * * *",
            {"output_weekday_names": False, "output_month_names": True, "output_hashes": False},
        )
    ]


def test_build_plain_never_calls_converter():
    converter = FakeConverter()
    cron = _builder("1 2 3 4 5", converter=converter)
    cron.build()
    cron.get_all()
    cron.get("minute")
    assert converter.compact_calls == []
    assert converter.expand_calls == []


def test_build_with_options():
    converter = FakeConverter(compacted="H * * * *")
    cron = _builder(converter=converter)
    assert cron.build_with(BuildOptions()) == "* * * * *"
    assert cron.build_with(BuildOptions(plain=False, output_hashes=True)) == "H * * * *"
    assert converter.compact_calls[0][1]["output_hashes"] is True


def test_get_all_expanded_uses_one_converter_call():
    converter = FakeConverter(expanded=[[0, 30], [9], [1], [1, 2], [1, 2, 3, 4, 5]])
    cron = _builder("0,30 9 1 1-2 1-5", converter=converter)

    expanded = cron.get_all(expand=True)
    assert expanded == {
        "minute": [0, 30],
        "hour": [9],
        "dayOfTheMonth": [1],
        "month": [1, 2],
        "dayOfTheWeek": [1, 2, 3, 4, 5],
    }
    assert converter.expand_calls == ["0,30 9 1 1-2 1-5"]


def test_get_expanded_single_field():
    converter = FakeConverter(expanded=[[0, 30], [9], [1], [1, 2], [1, 2, 3, 4, 5]])
    cron = _builder(converter=converter)
    assert cron.get("month", expand=True) == [1, 2]
    assert cron.get("day_of_the_week", expand=True) == [1, 2, 3, 4, 5]


def test_repr():
    assert repr(_builder("5 4 * * *")) == "CronBuilder('5 4 * * *')"


def test_set_all_rejects_field_and_alias_together():
    cron = _builder("0 12 * * 1")
    with pytest.raises(InvalidInputError):
        cron.set_all({"dayOfTheWeek": ["1-5"], "day_of_the_week": ["0"]})
    assert cron.build() == "0 12 * * 1"


def test_set_all_accepts_alias_alone():
    cron = _builder()
    cron.set_all({"day_of_the_month": ["1", "15"]})
    assert cron.build() == "* * 1,15 * *"
