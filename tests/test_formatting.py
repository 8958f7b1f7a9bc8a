from shared.formatting import (
    format_input_display,
    format_rupiah,
    format_signed_rupiah,
    month_label,
    parse_rupiah_input,
    transaction_type_label,
)
from shared.models import TransactionType


def test_format_rupiah_groups_thousands_with_dots() -> None:
    assert format_rupiah(0) == "Rp\u00a00"
    assert format_rupiah(1250000) == "Rp\u00a01.250.000"
    assert format_rupiah(-30000) == "-Rp\u00a030.000"


def test_format_signed_rupiah_follows_transaction_type() -> None:
    assert format_signed_rupiah(100000, TransactionType.INCOME) == "+Rp\u00a0100.000"
    assert format_signed_rupiah(30000, TransactionType.EXPENSE) == "-Rp\u00a030.000"


def test_parse_rupiah_input_keeps_digits_only() -> None:
    assert parse_rupiah_input("Rp 1.250.000") == 1250000
    assert parse_rupiah_input(format_rupiah(1250000)) == 1250000
    assert parse_rupiah_input("abc") == 0


def test_format_input_display() -> None:
    assert format_input_display(0) == ""
    assert format_input_display(1500) == "1.500"


def test_month_label_long_and_short() -> None:
    assert month_label("2024-08") == "Agustus 2024"
    assert month_label("2024-08", short=True) == "Agu 24"


def test_transaction_type_label() -> None:
    assert transaction_type_label(TransactionType.INCOME) == "Pemasukan"
    assert transaction_type_label(TransactionType.EXPENSE) == "Pengeluaran"
