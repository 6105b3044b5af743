"""
Command-line interface for cell-format.
"""

import json
import logging
from pathlib import Path

import click

from .converter import SheetFormatter, SheetFormatterConfig
from .exceptions import CellFormatError
from .formatter import format_value
from .templates import all_templates


def _parse_column_formats(pairs):
    formats = {}
    for pair in pairs:
        column, sep, format_string = pair.partition("=")
        if not sep or not column.strip():
            raise click.BadParameter(f"Expected COLUMN=FORMAT, got: {pair}", param_hint="-f/--column-format")
        formats[column.strip()] = format_string
    return formats


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.version_option(package_name='cell-format')
def main(verbose):
    """Render values and tables with Excel-style conditional format strings."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


@main.command()
@click.argument('value')
@click.argument('format_string')
@click.option('--json', 'as_json', is_flag=True, help='Print the display text and CSS style as JSON')
def render(value, format_string, as_json):
    """
    Render a single VALUE with FORMAT_STRING.

    Examples:

        cell-format render 95 '[>=90]"Excellent"[Green];"Other"'

        cell-format render -- -1000 '[>0]"$"#,##0.00;[<0]**"$"-#,##0.00**[Red]' --json
    """
    result = format_value(value, format_string)
    if as_json:
        click.echo(json.dumps({"value": result.value, "style": result.css()}, ensure_ascii=False))
    else:
        click.echo(result.value)


@main.command()
@click.argument('input_file', type=click.Path(exists=True))
@click.option('-f', '--column-format', 'column_formats', multiple=True, metavar='COLUMN=FORMAT',
              help='Format string for a column (header name or letter); repeatable')
@click.option('-t', '--tab-name', help='Sheet/tab name for Excel input (default: first sheet)')
@click.option('-o', '--output', type=click.Path(), help='Output file (default: stdout)')
@click.option('--format', 'output_format', type=click.Choice(['csv', 'html', 'markdown']), default='csv',
              help='Output format (default: csv)')
@click.option('--include-styles', is_flag=True, help='Append style flags such as {#RRGGBB} and {fc:#RRGGBB}')
@click.option('--use-sheet-formats', is_flag=True, help="Render Excel cells with their own number formats")
@click.option('--xlsx-out', type=click.Path(), help='Also write a styled workbook with raw values')
@click.option('--max-rows', type=int, default=300, help='Maximum rows to process (default: 300)')
@click.option('--no-header', is_flag=True, help='Exclude header row from output')
def apply(input_file, column_formats, tab_name, output, output_format, include_styles,
          use_sheet_formats, xlsx_out, max_rows, no_header):
    """
    Apply format strings to the columns of a CSV or XLSX file.

    Examples:

        cell-format apply scores.csv -f Score='[>=90]"A";[>=80]"B";"C"'

        cell-format apply report.xlsx -t Q1 -f C='"$"#,##0.00' --include-styles -o out.csv
    """
    try:
        formats = _parse_column_formats(column_formats)
        config = SheetFormatterConfig(
            header=not no_header,
            include_styles=include_styles,
            max_rows=max_rows,
        )
        formatter = SheetFormatter(config)

        result = formatter.convert(
            input_file,
            formats,
            tab_name=tab_name,
            output_format=output_format,
            use_sheet_formats=use_sheet_formats,
        )

        if xlsx_out:
            df = formatter.read_table(input_file, tab_name)
            formatter.export_xlsx(df, xlsx_out, formats)
            click.echo(f"Wrote {xlsx_out}", err=True)

        if output:
            Path(output).write_text(result, encoding='utf-8')
            click.echo(f"Converted to {output}")
        else:
            click.echo(result, nl=False)

    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()
    except CellFormatError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()


@main.command()
@click.option('--category', type=click.Choice(['standard', 'conditional', 'visual', 'rating', 'indicator', 'date']),
              help='Only list presets of this category')
def templates(category):
    """List preset format strings."""
    for template in all_templates(category):
        click.echo(f"{template.key:<16} {template.category:<12} {template.format}")


if __name__ == '__main__':
    main()
