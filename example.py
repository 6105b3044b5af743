#!/usr/bin/env python3
"""
Example usage of the cell-format library.
"""

from pathlib import Path

import pandas as pd

from cell_format import (
    FormatterHandle,
    SheetFormatter,
    SheetFormatterConfig,
    create_cell_style,
    create_value_formatter,
    format_value,
    get_template,
)
from cell_format.templates import currency_format, traffic_light_format


def main():
    """Demonstrate various features of the cell-format library."""

    # Example 1: Single values
    print("=== Example 1: Formatting Values ===")
    for value, fmt in [
        (123.456, "0.00"),
        (0.1234, "0.0%"),
        (1234.56, '"$" #,##0.00'),
        (-1234.5, '#,##0.00_);[Red](#,##0.00)'),
        (45000, "MMMM D, YYYY"),
    ]:
        result = format_value(value, fmt)
        print(f"  {value!r:>10} | {fmt:<30} -> {result.value!r} {result.css()}")
    print()

    # Example 2: Conditions with colors and emoji
    print("=== Example 2: Conditional Formats ===")
    traffic = traffic_light_format(80, 50)
    for score in (95, 65, 20):
        result = format_value(score, traffic)
        print(f"  {score:>3} -> {result.value} {result.css()}")

    grade = get_template("score_grade").format
    print(f"  score_grade(87) -> {format_value(87, grade).value}")
    print()

    # Example 3: Per-cell handles for grid columns
    print("=== Example 3: Grid Column Handles ===")
    value_formatter = create_value_formatter(currency_format())
    cell_style = create_cell_style(currency_format(), base_style={"textAlign": "right"})
    for amount in (1500, -250, 0):
        print(f"  {amount:>6} -> {value_formatter(amount):<12} {cell_style(amount)}")

    # Handles persist as plain data
    saved = value_formatter.model_dump_json()
    restored = FormatterHandle.model_validate_json(saved)
    print(f"  restored handle: {restored(42)!r}")
    print()

    # Example 4: Whole tables
    print("=== Example 4: Formatting a Table ===")
    df = pd.DataFrame({
        "Region": ["North", "South", "West"],
        "Revenue": [125000.5, -3200, 0],
        "Growth": [0.052, -0.013, 0],
    })
    formatter = SheetFormatter(SheetFormatterConfig(include_styles=True))
    formatted = formatter.format_frame(df, {
        "Revenue": currency_format(),
        "Growth": get_template("trend_arrows").format,
    })
    print(formatted.to_string(index=False))
    print()

    # Note: You'll need to provide your own Excel file
    excel_file = "example_data.xlsx"
    if Path(excel_file).exists():
        print(formatter.convert(excel_file, {"B": '"$"#,##0.00'}, output_format="markdown"))
    else:
        print(f"Please provide {excel_file} to run the file example")


if __name__ == "__main__":
    main()
