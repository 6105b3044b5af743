"""
Tests for the table formatter.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import Workbook, load_workbook

from cell_format import CellStyle, SheetFormatError, SheetFormatter, SheetFormatterConfig
from cell_format.converter import cell_value, hex_color

SCORE_FORMAT = '[>=60]"PASS"[Green];"FAIL"[Red]'


def create_test_excel(file_path: Path, with_formats=False):
    """Create a test Excel file."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Scores"

    ws['A1'] = 'Name'
    ws['B1'] = 'Score'
    ws['C1'] = 'Amount'
    ws['D1'] = 'When'

    ws['A2'] = 'Alice'
    ws['B2'] = 95
    ws['C2'] = 1234.5
    ws['D2'] = datetime(2024, 3, 15)

    ws['A3'] = 'Bob'
    ws['B3'] = 55
    ws['C3'] = -20
    ws['D3'] = datetime(2024, 1, 2)

    if with_formats:
        ws['C2'].number_format = '"$"#,##0.00'
        ws['C3'].number_format = '"$"#,##0.00;[Red]("$"#,##0.00)'
        ws['D2'].number_format = 'mm-dd-yy'

    wb.save(file_path)
    return wb


class TestSheetFormatter:
    """Test reading, formatting and serializing tables."""

    def test_format_frame(self):
        """Test rendering a column by header name."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            create_test_excel(xlsx_path)

            formatter = SheetFormatter()
            df = formatter.read_table(str(xlsx_path), 'Scores')
            result = formatter.format_frame(df, {"Score": SCORE_FORMAT})

            assert list(result["Score"]) == ["PASS", "FAIL"]
            # Source frame is not modified
            assert list(df["Score"]) == [95, 55]

    def test_column_letters(self):
        """Test resolving columns by Excel letter."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            create_test_excel(xlsx_path)

            formatter = SheetFormatter()
            df = formatter.read_table(str(xlsx_path))
            result = formatter.format_frame(df, {"C": '"$"#,##0.00', "d": "YYYY-MM-DD"})

            assert list(result["Amount"]) == ["$1,234.50", "-20"]
            assert list(result["When"]) == ["2024-03-15", "2024-01-02"]

    def test_style_flags(self):
        """Test inline style flags in the output."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            create_test_excel(xlsx_path)

            formatter = SheetFormatter(SheetFormatterConfig(include_styles=True))
            result = formatter.convert(str(xlsx_path), {"Score": SCORE_FORMAT}, tab_name='Scores')

            assert 'PASS{fc:#008000}' in result
            assert 'FAIL{fc:#FF0000}' in result

    def test_style_flag_encoding(self):
        """Test every flag kind."""
        style = CellStyle(
            color="#0f0",
            background_color="#FFFF00",
            font_weight="bold",
            font_style="italic",
            text_decoration="underline line-through",
        )
        assert SheetFormatter.style_flags(style) == '{#FFFF00}{fc:#00FF00}{b}{i}{u}{s}'
        assert SheetFormatter.style_flags(None) == ''
        assert SheetFormatter.style_flags(CellStyle(background_color="lightgreen")) == ''

    def test_csv_output(self):
        """Test CSV serialization with header."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            create_test_excel(xlsx_path)

            result = SheetFormatter().convert(str(xlsx_path), {"Score": SCORE_FORMAT})

            assert result.splitlines()[0] == 'Name,Score,Amount,When'
            assert 'Alice,PASS' in result
            assert 'Bob,FAIL' in result

    def test_markdown_and_html_output(self):
        """Test markdown and HTML serialization."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            create_test_excel(xlsx_path)

            formatter = SheetFormatter()
            markdown = formatter.convert(str(xlsx_path), {"Score": SCORE_FORMAT}, output_format="markdown")
            html = formatter.convert(str(xlsx_path), {"Score": SCORE_FORMAT}, output_format="html")

            assert '| Name' in markdown
            assert 'PASS' in markdown
            assert '<table' in html
            assert '<td>PASS</td>' in html

    def test_csv_input(self):
        """Test reading a CSV file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            csv_path = Path(temp_dir) / "scores.csv"
            csv_path.write_text("name,score\nA,95\nB,40\n", encoding="utf-8")

            result = SheetFormatter().convert(str(csv_path), {"score": SCORE_FORMAT})

            assert 'A,PASS' in result
            assert 'B,FAIL' in result

    def test_sheet_formats(self):
        """Test rendering cells with their own number formats."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "formats.xlsx"
            create_test_excel(xlsx_path, with_formats=True)

            result = SheetFormatter().convert(str(xlsx_path), use_sheet_formats=True)

            assert '$1,234.50' in result
            assert '($20.00)' in result
            assert '03-15-24' in result
            assert 'Alice,95' in result

    def test_sheet_formats_with_column_override(self):
        """Test that explicit column formats win over sheet formats."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "formats.xlsx"
            create_test_excel(xlsx_path, with_formats=True)

            result = SheetFormatter().convert(
                str(xlsx_path),
                {"Amount": '[<0]"owed";0.0'},
                use_sheet_formats=True,
            )

            assert '1234.5' in result
            assert 'owed' in result
            assert '$1,234.50' not in result

    def test_export_xlsx(self):
        """Test writing a styled workbook with raw values."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            out_path = Path(temp_dir) / "out.xlsx"
            create_test_excel(xlsx_path)

            formatter = SheetFormatter()
            df = formatter.read_table(str(xlsx_path))
            formatter.export_xlsx(df, str(out_path), {
                "Name": '[="Alice"][Bold][BG:#FFFF00]@;@',
                "Score": '[>=60][Green]0;[Red]0',
                "Amount": '"$"#,##0.00',
            })

            ws = load_workbook(out_path).active
            assert ws['A1'].value == 'Name'
            assert ws['B2'].value == 95
            assert ws['B2'].number_format == '0'
            assert ws['B2'].font.color.rgb.endswith('008000')
            assert ws['B3'].font.color.rgb.endswith('FF0000')
            assert ws['C2'].value == 1234.5
            assert ws['C2'].number_format == '"$"#,##0.00'
            assert ws['A2'].font.bold
            assert ws['A2'].fill.start_color.rgb.endswith('FFFF00')
            assert not ws['A3'].font.bold
            assert ws['D2'].value == datetime(2024, 3, 15)

    def test_file_not_found(self):
        """Test error handling for missing files."""
        formatter = SheetFormatter()

        with pytest.raises(FileNotFoundError):
            formatter.convert('nonexistent.xlsx', {})

    def test_unsupported_file(self):
        """Test error handling for unsupported file types."""
        with tempfile.TemporaryDirectory() as temp_dir:
            txt_path = Path(temp_dir) / "notes.txt"
            txt_path.write_text("hello", encoding="utf-8")

            with pytest.raises(SheetFormatError):
                SheetFormatter().convert(str(txt_path), {})

    def test_invalid_sheet_name(self):
        """Test error handling for invalid sheet names."""
        with tempfile.TemporaryDirectory() as temp_dir:
            xlsx_path = Path(temp_dir) / "test.xlsx"
            create_test_excel(xlsx_path)

            formatter = SheetFormatter()
            with pytest.raises(SheetFormatError):
                formatter.convert(str(xlsx_path), {}, tab_name='NonExistentSheet')
            with pytest.raises(SheetFormatError):
                formatter.convert(str(xlsx_path), {}, tab_name='NonExistentSheet', use_sheet_formats=True)

    def test_unknown_column(self):
        """Test error handling for unknown columns."""
        df = pd.DataFrame({"a": [1]})

        with pytest.raises(SheetFormatError):
            SheetFormatter().format_frame(df, {"missing": "0"})
        with pytest.raises(SheetFormatError):
            SheetFormatter().format_frame(df, {"Z": "0"})


class TestHelpers:
    """Test module helpers."""

    def test_hex_color(self):
        """Test hex normalization."""
        assert hex_color("#0f0") == "00FF00"
        assert hex_color("#ff0000") == "FF0000"
        assert hex_color("lightblue") is None
        assert hex_color("#12345") is None
        assert hex_color(None) is None

    def test_cell_value(self):
        """Test conversion of pandas cells."""
        assert cell_value(float("nan")) is None
        assert cell_value(pd.NaT) is None
        assert cell_value(pd.Timestamp("2024-03-15")) == datetime(2024, 3, 15)
        assert type(cell_value(pd.Series([1]).iloc[0])) is int
        assert cell_value("x") == "x"
