import json

import pytest

from sirenkit.fields import (
    ConfigError,
    ConfigOpenError,
    ConfigParseError,
    JsonKind,
    float_items,
    get_optional,
    get_required,
    int_items,
    kind_of,
)


@pytest.mark.parametrize(
    "text, kind",
    [
        ("null", JsonKind.NULL),
        ("true", JsonKind.BOOLEAN),
        ("false", JsonKind.BOOLEAN),
        ("3", JsonKind.INT),
        ("3.0", JsonKind.DOUBLE),
        ('"x"', JsonKind.STRING),
        ("[1, 2]", JsonKind.ARRAY),
        ('{"a": 1}', JsonKind.OBJECT),
    ],
)
def test_kind_of_decoded_json(text, kind):
    assert kind_of(json.loads(text)) is kind


def test_kind_of_rejects_non_json():
    with pytest.raises(TypeError):
        kind_of(object())


def test_get_required_returns_value():
    section = {"mic_num": 8, "ipc": "channel"}
    assert get_required(section, "mic_num", JsonKind.INT) == 8
    assert get_required(section, "ipc", JsonKind.STRING) == "channel"


def test_get_required_missing_key():
    with pytest.raises(ConfigParseError, match="cannot find key mic_num"):
        get_required({}, "mic_num", JsonKind.INT)


def test_get_required_wrong_kind():
    with pytest.raises(ConfigParseError, match="mic_num"):
        get_required({"mic_num": "8"}, "mic_num", JsonKind.INT)


def test_bool_is_not_int():
    with pytest.raises(ConfigParseError):
        get_required({"flag": True}, "flag", JsonKind.INT)


def test_int_is_not_double():
    with pytest.raises(ConfigParseError):
        get_required({"shield": 1}, "shield", JsonKind.DOUBLE)


def test_get_optional():
    section = {"scale": 2.5, "other": "x"}
    assert get_optional(section, "scale", JsonKind.DOUBLE) == 2.5
    assert get_optional(section, "other", JsonKind.DOUBLE) is None
    assert get_optional(section, "missing", JsonKind.DOUBLE) is None


def test_int_items_filters_and_keeps_order():
    assert int_items([3, 1.5, True, "2", 0, None, 7]) == [3, 0, 7]


def test_float_items_filters_and_keeps_order():
    assert float_items([0.25, 1, False, 2.5, "x"]) == [0.25, 2.5]


def test_items_of_empty_array():
    assert int_items([]) == []
    assert float_items([]) == []


def test_error_hierarchy():
    assert issubclass(ConfigParseError, ConfigError)
    assert issubclass(ConfigOpenError, ConfigError)
    with pytest.raises(ConfigError):
        get_required({}, "x", JsonKind.STRING)