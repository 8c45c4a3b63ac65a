# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""Display formatting helpers."""

CURRENCY_PREFIX = "Rp"


def format_currency(value: float) -> str:
    """
    Format an amount in Indonesian Rupiah style.

    Thousands are grouped with dots, decimals use a comma and at most three
    fraction digits are kept (trailing zeros dropped):

        1234567    -> "Rp 1.234.567"
        1234.5     -> "Rp 1.234,5"
        -2500000.0 -> "Rp -2.500.000"
    """
    rounded = round(float(value), 3)
    text = f"{abs(rounded):,.3f}".rstrip("0").rstrip(".")
    int_part, _, frac_part = text.partition(".")
    int_part = int_part.replace(",", ".")
    sign = "-" if rounded < 0 else ""
    if frac_part:
        return f"{CURRENCY_PREFIX} {sign}{int_part},{frac_part}"
    return f"{CURRENCY_PREFIX} {sign}{int_part}"
