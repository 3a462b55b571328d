"""
Spreadsheet row source — uploaded CSV/XLSX bytes → list of row dicts.

Every cell is read as a string (dtype=str, no NaN conversion) so the
importer sees exactly what the operator typed. Any parse problem is a
file-level failure: ImportFileError, and no rows at all.
"""
import asyncio
import io
import logging
from typing import Any, Dict, List

import pandas as pd

from outlet_ops.config import IMPORT_MAX_ROWS, IMPORT_MAX_SIZE_MB

logger = logging.getLogger('services.rowsource')

EXCEL_EXTENSIONS = ('.xlsx', '.xls')
CSV_EXTENSIONS = ('.csv',)


class ImportFileError(Exception):
    """The uploaded file could not be read as a spreadsheet."""


def read_rows(data: bytes, filename: str = '',
              max_rows: int = IMPORT_MAX_ROWS,
              max_size_mb: float = IMPORT_MAX_SIZE_MB) -> List[Dict[str, Any]]:
    """
    Parse the first sheet of an uploaded spreadsheet.

    Raises:
        ImportFileError: empty, oversized, unsupported or corrupt file.
    """
    if not data:
        raise ImportFileError('The uploaded file is empty.')

    size_mb = len(data) / (1024 * 1024)
    if size_mb > max_size_mb:
        raise ImportFileError(
            f'File too large ({size_mb:.1f}MB). Maximum allowed size is {max_size_mb}MB.'
        )

    name = (filename or '').lower()
    read_kwargs = {'dtype': str, 'keep_default_na': False}

    try:
        if name.endswith(CSV_EXTENSIONS):
            try:
                df = pd.read_csv(io.BytesIO(data), **read_kwargs)
            except UnicodeDecodeError:
                df = pd.read_csv(io.BytesIO(data), encoding='latin1', **read_kwargs)
        elif name.endswith(EXCEL_EXTENSIONS):
            df = pd.read_excel(io.BytesIO(data), sheet_name=0, **read_kwargs)
        else:
            raise ImportFileError(
                f"Unsupported file type '{filename}'. Upload a .xlsx, .xls or .csv file."
            )
    except ImportFileError:
        raise
    except Exception as e:
        logger.warning("Could not parse import file %s: %s", filename, e)
        raise ImportFileError(
            'Critical error processing file. Please ensure it is a valid .XLSX or .CSV.'
        ) from e

    if len(df) > max_rows:
        raise ImportFileError(f'File has {len(df)} rows; the limit is {max_rows}.')

    df.columns = [str(col).strip() for col in df.columns]
    rows = df.to_dict(orient='records')
    logger.info("Parsed %d rows from %s", len(rows), filename or 'upload')
    return rows


async def read_rows_async(data: bytes, filename: str = '', **kwargs) -> List[Dict[str, Any]]:
    """read_rows() off the event loop; parsing is the only blocking step of an import."""
    return await asyncio.to_thread(read_rows, data, filename, **kwargs)


def template_workbook(rows: List[Dict[str, Any]]) -> bytes:
    """XLSX bytes for the downloadable import template."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name='Template', index=False)
    return buffer.getvalue()
