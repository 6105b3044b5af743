"""
Apply format strings to whole tables read from CSV or XLSX files.
"""

from typing import Any, Dict, List, Literal, Optional
from pathlib import Path
import logging
import warnings

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import column_index_from_string, get_column_letter
from pydantic import BaseModel, Field

from .exceptions import SheetFormatError
from .formatter import FormatEngine, export_number_format, get_default_engine
from .models import CellStyle
from .values import display_text

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx", ".xlsm")
ALIGNMENTS = ("left", "center", "right", "justify")


class SheetFormatterConfig(BaseModel):
    """Configuration for table formatting."""

    index: bool = Field(
        default=False,
        description="Whether to include index in the output"
    )
    header: bool = Field(
        default=True,
        description="Whether to include the header row in the output"
    )
    keep_default_na: bool = Field(
        default=False,
        description="Whether to keep default NA values in pandas"
    )
    include_styles: bool = Field(
        default=False,
        description="Whether to append style flags such as {#RRGGBB} and {fc:#RRGGBB} to rendered cells"
    )
    max_rows: int = Field(
        default=300,
        ge=1,
        description="Maximum data rows to read"
    )
    max_columns: int = Field(
        default=100,
        ge=1,
        description="Maximum columns to read"
    )


class SheetFormatter:
    """Render table columns through the format engine."""

    def __init__(
        self,
        config: Optional[SheetFormatterConfig] = None,
        engine: Optional[FormatEngine] = None,
    ):
        """
        Initialize the formatter.

        Args:
            config: Optional configuration for reading and output
            engine: Format engine to use; the shared default engine when omitted
        """
        self.config = config or SheetFormatterConfig()
        self.engine = engine or get_default_engine()

    def read_table(self, input_file_path: str, tab_name: Optional[str] = None) -> pd.DataFrame:
        """
        Read a CSV or XLSX file with its first row as the header.

        Args:
            input_file_path: Path to a .csv, .xlsx or .xlsm file
            tab_name: Sheet to read from a workbook (first sheet when omitted)

        Returns:
            pd.DataFrame limited to ``max_rows`` rows and ``max_columns`` columns

        Raises:
            FileNotFoundError: If the input file doesn't exist
            SheetFormatError: For unsupported file types or a missing sheet
        """
        path = self._check_path(input_file_path)

        if path.suffix.lower() == ".csv":
            df = pd.read_csv(
                path,
                nrows=self.config.max_rows,
                keep_default_na=self.config.keep_default_na,
            )
        else:
            try:
                df = pd.read_excel(
                    path,
                    sheet_name=tab_name if tab_name is not None else 0,
                    keep_default_na=self.config.keep_default_na,
                    engine="openpyxl",
                    nrows=self.config.max_rows,
                )
            except ValueError as e:
                if "not found" in str(e) or "No sheet named" in str(e) or "Worksheet" in str(e):
                    raise SheetFormatError(f"Sheet '{tab_name}' not found in {path.name}") from e
                raise

        if len(df.columns) > self.config.max_columns:
            df = df.iloc[:, :self.config.max_columns]
        return df

    def resolve_column(self, df: pd.DataFrame, key: str) -> Any:
        """
        Find a column by header name, falling back to its Excel letter (A, B, ...).

        Raises:
            SheetFormatError: If no column matches
        """
        return df.columns[column_position(list(df.columns), key)]

    def format_frame(
        self,
        df: pd.DataFrame,
        column_formats: Dict[str, str],
        include_styles: Optional[bool] = None,
    ) -> pd.DataFrame:
        """
        Render the configured columns of ``df``; other columns are left untouched.

        Args:
            df: Source table
            column_formats: Column name or letter to format string
            include_styles: Append style flags (overrides config if provided)

        Returns:
            A new DataFrame with rendered text in the formatted columns
        """
        should_include_styles = include_styles if include_styles is not None else self.config.include_styles
        out = df.copy()

        for key, format_string in column_formats.items():
            column = self.resolve_column(df, key)
            handle = self.engine.create_value_formatter(format_string)
            rendered = []
            for value in df[column]:
                result = handle.result(cell_value(value))
                text = result.value
                if should_include_styles:
                    text += self.style_flags(result.style)
                rendered.append(text)
            out[column] = pd.Series(rendered, index=df.index, dtype=object)
            logger.debug("Formatted column %r with %r", column, format_string)

        return out

    def convert(
        self,
        input_file_path: str,
        column_formats: Optional[Dict[str, str]] = None,
        tab_name: Optional[str] = None,
        output_format: Literal["csv", "html", "markdown"] = "csv",
        use_sheet_formats: bool = False,
        include_styles: Optional[bool] = None,
    ) -> str:
        """
        Read a table, render its columns and serialize the result.

        Args:
            input_file_path: Path to a .csv, .xlsx or .xlsm file
            column_formats: Column name or letter to format string
            tab_name: Sheet to read from a workbook
            output_format: Format to convert to (csv, html, or markdown)
            use_sheet_formats: Render workbook cells with their own number formats;
                explicit ``column_formats`` take precedence
            include_styles: Append style flags (overrides config if provided)

        Returns:
            Formatted string in the requested format

        Raises:
            FileNotFoundError: If the input file doesn't exist
            SheetFormatError: For unsupported files, missing sheets or unknown columns
        """
        column_formats = column_formats or {}

        if use_sheet_formats:
            df = self._read_with_sheet_formats(input_file_path, tab_name, include_styles, column_formats)
        else:
            df = self.read_table(input_file_path, tab_name)
        df = self.format_frame(df, column_formats, include_styles)

        if output_format == "csv":
            return df.to_csv(index=self.config.index, header=self.config.header)
        elif output_format == "html":
            return df.to_html(index=self.config.index, header=self.config.header)
        elif output_format == "markdown":
            return df.to_markdown(index=self.config.index)
        raise SheetFormatError(f"Unsupported output format: {output_format}")

    def export_xlsx(
        self,
        df: pd.DataFrame,
        output_path: str,
        column_formats: Dict[str, str],
        sheet_name: str = "Sheet1",
    ) -> Path:
        """
        Write ``df`` to a workbook, keeping raw values and carrying formats as cell styles.

        Each formatted cell gets the font and fill of its matched section and an
        Excel ``number_format`` derived from the format string.

        Args:
            df: Table with raw (unrendered) values
            output_path: Destination .xlsx path
            column_formats: Column name or letter to format string
            sheet_name: Title of the written sheet

        Returns:
            Path of the written workbook
        """
        resolved = {self.resolve_column(df, key): fmt for key, fmt in column_formats.items()}
        number_formats = {column: export_number_format(fmt) for column, fmt in resolved.items()}

        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name

        for col_idx, column in enumerate(df.columns, start=1):
            ws.cell(row=1, column=col_idx, value=str(column))

        for row_idx, (_, row) in enumerate(df.iterrows(), start=2):
            for col_idx, column in enumerate(df.columns, start=1):
                value = cell_value(row[column])
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                if column not in resolved:
                    continue
                cell.number_format = number_formats[column]
                style = self.engine.format(value, resolved[column]).style
                if style is not None:
                    self._apply_cell_style(cell, style)

        path = Path(output_path)
        wb.save(path)
        logger.info("Wrote %d rows to %s", len(df), path)
        return path

    @staticmethod
    def style_flags(style: Optional[CellStyle]) -> str:
        """
        Encode a style as inline flags.

        Examples:
            >>> SheetFormatter.style_flags(CellStyle(color="#f00", font_weight="bold"))
            '{fc:#FF0000}{b}'
        """
        if style is None:
            return ""
        flags = []
        background = hex_color(style.background_color)
        if background:
            flags.append(f"{{#{background}}}")
        color = hex_color(style.color)
        if color:
            flags.append(f"{{fc:#{color}}}")
        if style.font_weight == "bold":
            flags.append("{b}")
        if style.font_style == "italic":
            flags.append("{i}")
        decoration = style.text_decoration or ""
        if "underline" in decoration:
            flags.append("{u}")
        if "line-through" in decoration:
            flags.append("{s}")
        return "".join(flags)

    def _check_path(self, input_file_path: str) -> Path:
        path = Path(input_file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {input_file_path}")
        if path.suffix.lower() not in (".csv",) + EXCEL_SUFFIXES:
            raise SheetFormatError(f"File must be a CSV or Excel file (csv/xlsx), got: {path.suffix}")
        return path

    def _read_with_sheet_formats(
        self,
        input_file_path: str,
        tab_name: Optional[str],
        include_styles: Optional[bool],
        column_formats: Dict[str, str],
    ) -> pd.DataFrame:
        """
        Render every cell with its own ``number_format`` as stored in the workbook.

        Columns named in ``column_formats`` keep their raw values for :meth:`format_frame`.
        """
        path = self._check_path(input_file_path)
        if path.suffix.lower() not in EXCEL_SUFFIXES:
            raise SheetFormatError("Sheet formats are only available for Excel files")

        should_include_styles = include_styles if include_styles is not None else self.config.include_styles

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            wb = load_workbook(path, data_only=True)
        try:
            if tab_name is None:
                ws = wb.worksheets[0]
            elif tab_name in wb.sheetnames:
                ws = wb[tab_name]
            else:
                raise SheetFormatError(f"Sheet '{tab_name}' not found in {path.name}")

            rows = ws.iter_rows(
                max_row=self.config.max_rows + 1,
                max_col=self.config.max_columns,
            )
            header_cells = next(rows, ())
            header = [
                display_text(cell.value) or get_column_letter(idx)
                for idx, cell in enumerate(header_cells, start=1)
            ]
            raw_positions = {column_position(header, key) for key in column_formats}

            data = []
            for row in rows:
                rendered = []
                for position, cell in enumerate(row):
                    if position in raw_positions:
                        rendered.append(cell.value)
                        continue
                    result = self.engine.format(cell.value, cell.number_format)
                    text = result.value
                    if should_include_styles:
                        text += self.style_flags(result.style)
                    rendered.append(text)
                data.append(rendered)
        finally:
            wb.close()

        return pd.DataFrame(data, columns=header)

    @staticmethod
    def _apply_cell_style(cell, style: CellStyle) -> None:
        color = hex_color(style.color)
        decoration = style.text_decoration or ""
        cell.font = Font(
            color=color,
            bold=style.font_weight == "bold",
            italic=style.font_style == "italic",
            underline="single" if "underline" in decoration else None,
            strike="line-through" in decoration,
        )
        background = hex_color(style.background_color)
        if background:
            cell.fill = PatternFill(start_color=background, end_color=background, fill_type="solid")
        if style.text_align in ALIGNMENTS:
            cell.alignment = Alignment(horizontal=style.text_align)


def hex_color(color: Optional[str]) -> Optional[str]:
    """
    Normalize ``#rgb``/``#rrggbb`` to upper-case ``RRGGBB``; other colors give None.

    Examples:
        >>> hex_color("#0f0")
        '00FF00'
        >>> hex_color("lightblue") is None
        True
    """
    if not color or not color.startswith("#"):
        return None
    digits = color[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6 or any(c not in "0123456789abcdefABCDEF" for c in digits):
        return None
    return digits.upper()


def cell_value(value: Any) -> Any:
    """Convert a pandas cell to a plain Python value; missing values become None."""
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if not isinstance(value, str) and pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        return value.item()
    return value


def column_position(columns: List[Any], key: str) -> int:
    """
    Zero-based position of a column given its header name or Excel letter.

    Raises:
        SheetFormatError: If no column matches
    """
    if key in columns:
        return columns.index(key)
    if key.isalpha():
        try:
            position = column_index_from_string(key.upper())
        except ValueError:
            position = 0
        if 1 <= position <= len(columns):
            return position - 1
    raise SheetFormatError(f"Unknown column: {key}")
