from decimal import Decimal
from typing import Any

import barcode as pybarcode
import pytest

from shelfmarket.barcodegen.ean13_encoder import (
    build_ean13,
    compose_data12,
    compute_check_digit,
    format_price_da,
    is_valid_ean13,
    split_ean13,
    validate_ean13,
)
from shelfmarket.barcodegen.exceptions import Ean13Error

SAMPLE_PAYLOADS = [
    "000000000000",
    "590123412345",
    "400638133393",
    "000123000456",
    "999999999999",
    "123456789012",
    "870000000001",
]


class TestComposeData12:
    """Payload composition: digit stripping, rounding, padding and overflow."""

    def test_strips_non_digits_and_pads(self) -> None:
        assert compose_data12("A12-3", Decimal("4.56"), 6, 6) == "000123000456"

    def test_float_price_is_taken_at_face_value(self) -> None:
        assert compose_data12("A12-3", 4.56, 6, 6) == "000123000456"

    @pytest.mark.parametrize(
        "price,expected_cents",
        [
            ("0.005", "000001"),
            ("0.004", "000000"),
            ("0.015", "000002"),
            ("0.025", "000003"),
            ("12.345", "001235"),
            (7, "000700"),
        ],
    )
    def test_rounds_half_away_from_zero(self, price: Any, expected_cents: str) -> None:
        assert compose_data12("1", price)[6:] == expected_cents

    def test_negative_price_encodes_as_positive(self) -> None:
        assert compose_data12("7", "-4.56") == compose_data12("7", "4.56")
        assert compose_data12("7", "-0.005") == "000007000001"

    @pytest.mark.parametrize("shelf", ["", "abc", "--", None])
    def test_empty_shelf_becomes_zero(self, shelf: Any) -> None:
        assert compose_data12(shelf, "1.00") == "000000000100"

    @pytest.mark.parametrize(
        "shelf_width,price_width,shelf,price,expected",
        [
            (3, 9, "12", "1.00", "012000000100"),
            (1, 11, "9", "0", "900000000000"),
            (11, 1, "42", "0.09", "000000000429"),
        ],
    )
    def test_custom_widths(
        self, shelf_width: int, price_width: int, shelf: str, price: str, expected: str
    ) -> None:
        result = compose_data12(shelf, price, shelf_width, price_width)
        assert result == expected
        assert len(result) == shelf_width + price_width

    def test_shelf_overflow(self) -> None:
        with pytest.raises(Ean13Error, match="Shelf number has more than 6 digits"):
            compose_data12("1234567", "1.00")

    def test_shelf_at_capacity_is_accepted(self) -> None:
        assert compose_data12("R-999999", "0") == "999999000000"

    @pytest.mark.parametrize(
        "price",
        ["10000.00", Decimal("1e30"), 1e30, "1e40", "-1e40", Decimal("9e999999")],
    )
    def test_price_overflow(self, price: Any) -> None:
        with pytest.raises(Ean13Error, match=r"Price \(in cents\) has more than 6 digits"):
            compose_data12("1", price)

    def test_huge_price_fails_through_build(self) -> None:
        with pytest.raises(Ean13Error, match="Price"):
            build_ean13("1", Decimal("1e30"), 3, 9)

    def test_price_at_capacity_is_accepted(self) -> None:
        assert compose_data12("1", "9999.99") == "000001999999"

    @pytest.mark.parametrize("widths", [(5, 5), (0, 12), (12, 0), (13, -1), (6, 7)])
    def test_bad_widths_always_fail(self, widths: tuple[int, int]) -> None:
        with pytest.raises(Ean13Error, match="sum to 12"):
            compose_data12("1", "1.00", *widths)

    def test_bad_widths_checked_before_other_arguments(self) -> None:
        with pytest.raises(Ean13Error, match="sum to 12"):
            compose_data12("12345678901234", "not a price", 5, 5)

    @pytest.mark.parametrize("price", ["abc", "", float("nan"), float("inf"), Decimal("NaN")])
    def test_unusable_price(self, price: Any) -> None:
        with pytest.raises(Ean13Error, match="Price"):
            compose_data12("1", price)

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            compose_data12("1", "1", 5, 5)


class TestCheckDigit:
    def test_standard_example(self) -> None:
        assert compute_check_digit("590123412345") == 7

    @pytest.mark.parametrize("data12", SAMPLE_PAYLOADS)
    def test_matches_python_barcode(self, data12: str) -> None:
        reference = pybarcode.get_barcode_class("ean13")(data12).get_fullcode()
        assert f"{data12}{compute_check_digit(data12)}" == reference

    @pytest.mark.parametrize("data12", SAMPLE_PAYLOADS)
    def test_weighted_sum_is_multiple_of_ten(self, data12: str) -> None:
        code = data12 + str(compute_check_digit(data12))
        total = sum(int(d) * (3 if i % 2 else 1) for i, d in enumerate(code))
        assert total % 10 == 0

    @pytest.mark.parametrize(
        "bad",
        [
            "123",
            "5901234123457",
            "59012341234a",
            "            ",
            "٥٩٠١٢٣٤١٢٣٤٥",  # Arabic-Indic digits
            590123412345,
            None,
        ],
    )
    def test_rejects_malformed_input(self, bad: Any) -> None:
        with pytest.raises(Ean13Error, match="exactly 12 digits"):
            compute_check_digit(bad)


class TestBuildAndValidate:
    def test_build_appends_own_check_digit(self) -> None:
        data12 = compose_data12("123", Decimal("4.56"), 6, 6)
        code = build_ean13("123", Decimal("4.56"), 6, 6)
        assert code == data12 + str(compute_check_digit(data12))
        assert code == "0001230004561"
        assert len(code) == 13

    def test_build_propagates_composition_errors(self) -> None:
        with pytest.raises(Ean13Error):
            build_ean13("1234567", "1.00")

    @pytest.mark.parametrize("data12", SAMPLE_PAYLOADS)
    def test_every_wrong_check_digit_is_rejected(self, data12: str) -> None:
        good = compute_check_digit(data12)
        validate_ean13(f"{data12}{good}")
        for wrong in (d for d in range(10) if d != good):
            with pytest.raises(Ean13Error, match="check digit mismatch"):
                validate_ean13(f"{data12}{wrong}")

    @pytest.mark.parametrize(
        "bad", ["", "590123412345", "59012341234577", "590123412345X", "5901 23412345", None]
    )
    def test_validate_rejects_bad_format(self, bad: Any) -> None:
        with pytest.raises(Ean13Error, match="exactly 13 digits"):
            validate_ean13(bad)

    def test_is_valid(self) -> None:
        assert is_valid_ean13("5901234123457")
        assert not is_valid_ean13("5901234123458")
        assert not is_valid_ean13("abc")


class TestSplit:
    def test_split_round_trip(self) -> None:
        assert split_ean13("0001230004561") == ("123", Decimal("4.56"))

    def test_all_zero_shelf_shows_zero(self) -> None:
        shelf, price = split_ean13("0000000000000")
        assert shelf == "0"
        assert str(price) == "0.00"

    def test_custom_shelf_width(self) -> None:
        code = build_ean13("12", "1.00", 3, 9)
        assert split_ean13(code, shelf_width=3) == ("12", Decimal("1.00"))

    def test_split_rejects_invalid_code(self) -> None:
        with pytest.raises(Ean13Error):
            split_ean13("0001230004562")

    def test_split_rejects_bad_width(self) -> None:
        with pytest.raises(Ean13Error, match="sum to 12"):
            split_ean13("0001230004561", shelf_width=12)


@pytest.mark.parametrize(
    "price,expected",
    [(Decimal("12.5"), "12,50"), (Decimal("0"), "0,00"), (Decimal("9999.99"), "9999,99")],
)
def test_format_price_da(price: Decimal, expected: str) -> None:
    assert format_price_da(price) == expected
