"""Immutable tabular payloads for bulk ingest submissions."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterator, Mapping

from .applink_errors import DataTableError


@dataclass(frozen=True)
class DataTable:
    """Column-ordered rows ready for CSV upload.

    Attributes:
        columns: Column names in upload order.
        rows: Row values aligned with `columns`.
    """

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]

    def data_table_render_csv_chunks(self, max_chunk_bytes: int) -> Iterator[str]:
        """Yield CSV documents, each with a header and at most `max_chunk_bytes` bytes.

        Args:
            max_chunk_bytes: Upper bound on encoded chunk size.

        Yields:
            str: CSV document text with `LF` line endings.

        Raises:
            DataTableError: Raised when a single row cannot fit into one chunk.
        """

        header_line = self._data_table_render_line(self.columns)
        header_size = len(header_line.encode("utf-8"))
        chunk_lines: list[str] = []
        chunk_size = header_size

        for row in self.rows:
            row_line = self._data_table_render_line(row)
            row_size = len(row_line.encode("utf-8"))
            if header_size + row_size > max_chunk_bytes:
                raise DataTableError("data table row exceeds maximum bulk upload size")
            if chunk_lines and chunk_size + row_size > max_chunk_bytes:
                yield header_line + "".join(chunk_lines)
                chunk_lines = []
                chunk_size = header_size
            chunk_lines.append(row_line)
            chunk_size += row_size

        if chunk_lines:
            yield header_line + "".join(chunk_lines)

    @staticmethod
    def _data_table_render_line(values: tuple[str, ...]) -> str:
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator="\n").writerow(values)
        return buffer.getvalue()


class DataTableBuilder:
    """Accumulate mapping rows against a fixed column list."""

    def __init__(self, columns: list[str] | tuple[str, ...]):
        normalized_columns = tuple(column.strip() for column in columns)
        if not normalized_columns:
            raise DataTableError("columns must not be empty")
        if any(not column for column in normalized_columns):
            raise DataTableError("column names must not be blank")
        if len(set(normalized_columns)) != len(normalized_columns):
            raise DataTableError("column names must be unique")
        self._columns = normalized_columns
        self._rows: list[tuple[str, ...]] = []

    def data_table_add_row(self, row: Mapping[str, object]) -> DataTableBuilder:
        """Append one row; missing columns become empty values.

        Args:
            row: Values keyed by column name.

        Returns:
            DataTableBuilder: This builder, for chaining.

        Raises:
            DataTableError: Raised when the row uses undeclared columns.
        """

        unknown_columns = sorted(set(row) - set(self._columns))
        if unknown_columns:
            raise DataTableError(f"row uses undeclared columns: {', '.join(unknown_columns)}")
        self._rows.append(tuple("" if row.get(column) is None else str(row[column]) for column in self._columns))
        return self

    def data_table_build(self) -> DataTable:
        return DataTable(columns=self._columns, rows=tuple(self._rows))
