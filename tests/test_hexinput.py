import pytest

from canstudio.hexinput import HexFormatError, parse_data, parse_id


def test_parse_id_reads_eight_hex_digits():
    assert parse_id("18FEF100") == 0x18FEF100


def test_parse_id_accepts_either_case():
    assert parse_id("0cf00400") == parse_id("0CF00400")


@pytest.mark.parametrize(
    "text", ["", "18FEF10", "18FEF1000", "18FEG100", "18FEF100\n", " 18FEF10", "0x18FEF1"]
)
def test_parse_id_rejects_wrong_format(text):
    with pytest.raises(HexFormatError):
        parse_id(text)


def test_hex_format_error_is_value_error():
    with pytest.raises(ValueError):
        parse_id("zz")


def test_parse_data_contiguous_pairs():
    assert parse_data("0102030405060708") == bytes([1, 2, 3, 4, 5, 6, 7, 8])


def test_parse_data_spaced_pairs():
    assert parse_data("01 02 ff") == b"\x01\x02\xff"


def test_parse_data_spaced_and_contiguous_agree():
    assert parse_data("DE AD BE EF") == parse_data("deadbeef")


def test_parse_data_allows_one_leading_space():
    assert parse_data(" 7f") == b"\x7f"


@pytest.mark.parametrize(
    "text", ["", "0", "012", "01  02", "01 0", "gg", "01 02 ", "  01", "01-02"]
)
def test_parse_data_rejects_wrong_format(text):
    with pytest.raises(HexFormatError):
        parse_data(text)


def test_parse_data_length_is_half_the_digits():
    text = "00" * 20
    assert len(parse_data(text)) == 20


def test_parse_data_round_trip_through_hex():
    payload = bytes(range(0, 256, 17))
    assert parse_data(payload.hex()) == payload
    assert parse_data(" ".join(f"{b:02X}" for b in payload)) == payload