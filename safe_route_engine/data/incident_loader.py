"""
Incident data loader with column-name normalization and row validation.
"""

import logging
import math
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from ..errors import DataLoadError
from .models import Incident, LoadReport

logger = logging.getLogger(__name__)

# Accepted spellings, checked in order
LATITUDE_COLUMNS = ('lat', 'latitude', 'Latitude')
LONGITUDE_COLUMNS = ('long', 'longitude', 'lon', 'Longitude')
ID_COLUMN = 'id'


def _first_present(row: Mapping[str, Any], columns: Tuple[str, ...]) -> Any:
    for column in columns:
        if column in row:
            return row[column]
    return None


def _parse_coordinate(value: Any) -> Optional[float]:
    """Parse a raw cell to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _parse_id(value: Any, fallback: int) -> Union[int, str]:
    if value is None:
        return fallback
    if isinstance(value, float):
        if not math.isfinite(value):
            return fallback
        if value.is_integer():
            return int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback
    return value


def parse_incident_rows(rows: Iterable[Mapping[str, Any]]) -> Tuple[List[Incident], LoadReport]:
    """
    Normalize raw rows into incidents.

    Rows whose coordinates do not parse to finite numbers are dropped and
    counted; a bad row never fails the load.

    Args:
        rows: Mappings keyed by any of the accepted column spellings

    Returns:
        Tuple of (valid incidents, load report)
    """
    incidents: List[Incident] = []
    total_rows = 0
    invalid_rows = 0

    for row in rows:
        total_rows += 1
        lat = _parse_coordinate(_first_present(row, LATITUDE_COLUMNS))
        lon = _parse_coordinate(_first_present(row, LONGITUDE_COLUMNS))

        if lat is None or lon is None or not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
            invalid_rows += 1
            continue

        incident_id = _parse_id(row.get(ID_COLUMN), len(incidents))
        incidents.append(Incident(id=incident_id, lat=lat, lon=lon))

    report = LoadReport(total_rows=total_rows, valid_rows=len(incidents), invalid_rows=invalid_rows)
    logger.info(f"Processed {report.total_rows} total rows, "
                f"skipped {report.invalid_rows} with invalid coordinates, "
                f"{report.valid_rows} valid incidents")
    return incidents, report


def read_incident_file(data_path: Union[str, Path]) -> Tuple[List[Incident], LoadReport]:
    """
    Read incidents from a CSV file.

    Args:
        data_path: Path to the CSV incident file

    Returns:
        Tuple of (valid incidents, load report)

    Raises:
        DataLoadError: If the file is missing or cannot be parsed as CSV
    """
    data_path = Path(data_path)
    if not data_path.exists():
        raise DataLoadError(f"Incident data file not found: {data_path}")

    logger.info(f"Loading incident data from: {data_path}")

    try:
        # Keep cells as text so bad coordinates are counted rather than coerced
        frame = pd.read_csv(data_path, dtype=str, keep_default_na=False)
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise DataLoadError(f"Could not parse incident data file {data_path}: {e}") from e

    return parse_incident_rows(frame.to_dict(orient='records'))
