import os
import zipfile
from dataclasses import dataclass, field, replace
from typing import List, Tuple

import pandas as pd

import config
from commands import Create, apply
from database import AssetType
from log_config import get_logger
from query import QueryParams, run_query

logger = get_logger(__name__)


class ImportFileError(ValueError):
    """Raised when an uploaded file cannot be turned into asset drafts."""


class UnsupportedFileError(ImportFileError):
    pass


@dataclass
class ImportReport:
    drafts: List[dict] = field(default_factory=list)
    skipped: List[Tuple[int, str]] = field(default_factory=list)
    created_ids: List[int] = field(default_factory=list)


def _to_csv_bytes(df):
    return df.to_csv(index=False, lineterminator="\n").encode('utf-8')


def export_columns(include_model=False):
    columns = list(config.EXPORT_COLUMNS)
    if include_model:
        columns.insert(columns.index("Brand") + 1, "Model")
    return columns


def export_csv(rows, include_model=False):
    """Serialize asset rows to CSV bytes with the inventory export header."""
    df = pd.DataFrame(rows, columns=export_columns(include_model))
    df["Assigned Date"] = df["Assigned Date"].map(lambda d: d.isoformat() if d is not None and pd.notna(d) else None)
    return _to_csv_bytes(df)


def export_view(db, params=None, include_model=False):
    """Export every asset matching the current filters, ignoring pagination."""
    params = replace(params or QueryParams(), page=1, page_size=None)
    result = run_query(db, params)
    logger.info("Exporting %s assets to CSV", result.total_count)
    return export_csv(result.rows, include_model=include_model)


def template_csv():
    df = pd.DataFrame(config.TEMPLATE_SAMPLE_ROWS, columns=config.TEMPLATE_COLUMNS)
    return _to_csv_bytes(df)


def _cell(value):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    value = str(value).strip()
    return value or None


def _read_frame(file, ext, filename):
    try:
        if ext == ".csv":
            return pd.read_csv(file, dtype=str, keep_default_na=False)
        return pd.read_excel(file, dtype=str)
    except (ValueError, ImportError, OSError, zipfile.BadZipFile) as e:
        raise ImportFileError(f"Could not read {filename}: {e}") from e


def read_drafts(file, filename):
    """Parse an uploaded CSV/XLSX/XLS into asset drafts keyed by template header."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in config.IMPORT_EXTENSIONS:
        raise UnsupportedFileError(
            f"Unsupported file type '{ext or filename}'. Use one of: {', '.join(config.IMPORT_EXTENSIONS)}"
        )

    df = _read_frame(file, ext, filename)
    lookup = {c.lower(): c for c in config.TEMPLATE_COLUMNS}
    df = df.rename(columns=lambda c: lookup.get(str(c).strip().lower(), str(c).strip()))

    missing = [c for c in config.REQUIRED_DRAFT_FIELDS if c not in df.columns]
    if missing:
        raise ImportFileError(f"Missing required columns: {', '.join(missing)}")

    report = ImportReport()
    for index, row in df.iterrows():
        # Header is line 1 of the sheet
        line = index + 2
        draft = {c: _cell(row[c]) if c in df.columns else None for c in config.TEMPLATE_COLUMNS}
        empty = [c for c in config.REQUIRED_DRAFT_FIELDS if not draft[c]]
        if empty:
            report.skipped.append((line, f"missing {', '.join(empty)}"))
            continue
        asset_type = AssetType.parse(draft["Asset Type"])
        if asset_type is None:
            report.skipped.append((line, f"unknown asset type '{draft['Asset Type']}'"))
            continue
        draft["Asset Type"] = asset_type.value
        report.drafts.append(draft)

    for line, reason in report.skipped:
        logger.warning("Skipping row %s of %s: %s", line, filename, reason)
    return report


def import_assets(db, file, filename):
    report = read_drafts(file, filename)
    for draft in report.drafts:
        result = apply(db, Create(draft))
        if result.applied:
            report.created_ids.append(result.asset_id)
    logger.info("Imported %s of %s rows from %s", len(report.created_ids), len(report.drafts) + len(report.skipped), filename)
    return report
