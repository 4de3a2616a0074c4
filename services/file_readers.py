"""Decode uploaded files into the primitive shapes the parsers accept."""
from __future__ import annotations

import csv
import io
import json
import logging
import zipfile
from typing import Any

from openpyxl import load_workbook

from core.errors import SourceReadFailure
from services.sentence_index import sentences_from_grid, sentences_from_mapping

logger = logging.getLogger(__name__)

Grid = list[list[Any]]


def _extension(filename: str) -> str:
    name = (filename or "").lower()
    return name.rsplit(".", 1)[-1] if "." in name else ""


def _trim_row(row) -> list[Any]:
    cells = list(row)
    while cells and cells[-1] is None:
        cells.pop()
    return cells


def read_workbook_grids(data: bytes, *, first_sheet_only: bool = False) -> list[Grid]:
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise SourceReadFailure("Workbook could not be opened.") from exc

    grids: list[Grid] = []
    try:
        for ws in wb.worksheets:
            rows = [_trim_row(row) for row in ws.iter_rows(values_only=True)]
            while rows and not rows[-1]:
                rows.pop()
            grids.append(rows)
            if first_sheet_only:
                break
    finally:
        wb.close()
    return grids


def read_csv_grid(data: bytes) -> Grid:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SourceReadFailure("CSV must be UTF-8 encoded.") from exc
    return [row for row in csv.reader(io.StringIO(text))]


def read_word_grids(filename: str, data: bytes) -> list[Grid]:
    """One grid per worksheet for workbooks, a single grid for CSV."""
    ext = _extension(filename)
    if ext == "xlsx":
        return read_workbook_grids(data)
    if ext == "csv":
        return [read_csv_grid(data)]
    raise SourceReadFailure("Only .xlsx and .csv word files can be imported.")


def read_sentences(filename: str, data: bytes) -> dict[str, str]:
    ext = _extension(filename)
    if ext == "json":
        try:
            obj = json.loads(data.decode("utf-8-sig"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise SourceReadFailure("Sentence file is not valid JSON.") from exc
        if not isinstance(obj, dict):
            raise SourceReadFailure("Sentence JSON must be an object of word -> sentence.")
        return sentences_from_mapping(obj)
    if ext == "xlsx":
        grids = read_workbook_grids(data, first_sheet_only=True)
        return sentences_from_grid(grids[0] if grids else [])
    if ext == "csv":
        return sentences_from_grid(read_csv_grid(data))
    raise SourceReadFailure("Only .json, .xlsx and .csv sentence files can be imported.")
