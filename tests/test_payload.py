import pytest

from src.promotion_system.promotion_system.common.payload import get_int, get_str, parse_payload
from src.promotion_system.promotion_system.core.exceptions import InvalidPayloadError


def test_parse_payload_accepts_json_object_text_and_dict():
    assert parse_payload('{"candidateId": 3}') == {"candidateId": 3}
    assert parse_payload({"a": 1}) == {"a": 1}


@pytest.mark.parametrize("raw", [None, "", "{broken", "[1, 2]", '"text"'])
def test_parse_payload_rejects_non_objects(raw):
    with pytest.raises(InvalidPayloadError):
        parse_payload(raw)


def test_get_int_coerces_numeric_strings():
    data = {"a": "12", "b": 7, "c": "x", "d": True, "e": None}

    assert get_int(data, "a") == 12
    assert get_int(data, "b") == 7
    assert get_int(data, "c") is None
    assert get_int(data, "d") is None
    assert get_int(data, "e") is None
    assert get_int(data, "missing") is None


def test_get_str_strips_blank_to_none():
    data = {"a": "  대리 ", "b": "   ", "c": 5}

    assert get_str(data, "a") == "대리"
    assert get_str(data, "b") is None
    assert get_str(data, "c") == "5"
