"""
Collision loading and peak-hour aggregation
===========================================
Reads a collision CSV, coerces each row into a typed record and counts
collisions per (city, hour) over a fixed set of target cities and peak hours.

The result is a dense matrix: one row per city x hour pair, in declared
city order then declared hour order, with explicit zeros for pairs that
have no collisions.
"""

import pandas as pd

# Source column -> record field
COLUMN_MAP = {
    'local_authority_highway': 'city',
    'time': 'hour',
    'collision_severity': 'severity',
    'number_of_casualties': 'casualties',
    'number_of_vehicles': 'vehicles',
    'longitude': 'longitude',
    'latitude': 'latitude',
}

RECORD_COLUMNS = list(COLUMN_MAP.values())
MATRIX_COLUMNS = ['city', 'hour', 'collisions']


class ResourceLoadError(Exception):
    """The collision CSV could not be read or lacks required columns."""


def parse_hour(times):
    """Hour component of 'HH:MM' strings; NaN where it isn't a number."""
    hours = times.astype(str).str.split(':').str[0].str.strip()
    return pd.to_numeric(hours, errors='coerce')


def parse_records(raw):
    """Coerce raw CSV columns into the record shape."""
    records = pd.DataFrame({
        'city': raw['local_authority_highway'],
        'hour': parse_hour(raw['time']),
        'severity': raw['collision_severity'],
        'casualties': pd.to_numeric(raw['number_of_casualties'], errors='coerce'),
        'vehicles': pd.to_numeric(raw['number_of_vehicles'], errors='coerce'),
        'longitude': pd.to_numeric(raw['longitude'], errors='coerce'),
        'latitude': pd.to_numeric(raw['latitude'], errors='coerce'),
    }, columns=RECORD_COLUMNS)
    return records


def load_collisions(csv_path):
    """Load the collision CSV into records, raising ResourceLoadError on failure."""
    try:
        raw = pd.read_csv(csv_path, low_memory=False)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError,
            pd.errors.EmptyDataError) as e:
        raise ResourceLoadError(f"{csv_path}: {e}") from e

    missing = [col for col in COLUMN_MAP if col not in raw.columns]
    if missing:
        raise ResourceLoadError(
            f"{csv_path}: missing required columns: {', '.join(missing)}"
        )

    records = parse_records(raw)
    print(f"  Collisions:          {len(records):>8,} records")
    return records


def filter_collisions(records, config):
    """
    Keep rows whose city is a target city and whose hour is a peak hour.

    Hours are matched by set membership, so a missing or out-of-range hour
    simply drops out.
    """
    mask = (
        records['city'].isin(config['target_cities'])
        & records['hour'].isin(config['peak_hours'])
    )
    filtered = records[mask].copy()
    filtered['hour'] = filtered['hour'].astype(int)
    return filtered


def aggregate_matrix(filtered, config):
    """Count collisions per (city, hour) over the full target x peak grid."""
    index = pd.MultiIndex.from_product(
        [list(config['target_cities']), list(config['peak_hours'])],
        names=['city', 'hour'],
    )

    if filtered.empty:
        counts = pd.Series(0, index=index)
    else:
        counts = filtered.groupby(['city', 'hour']).size()
        counts = counts.reindex(index, fill_value=0)

    matrix = counts.astype(int).reset_index(name='collisions')
    return matrix[MATRIX_COLUMNS]


def max_collisions(matrix):
    if matrix.empty:
        return 0
    return int(matrix['collisions'].max())


def build_matrix(records, config):
    """Filter and aggregate records; returns (matrix, max collisions)."""
    filtered = filter_collisions(records, config)
    matrix = aggregate_matrix(filtered, config)
    peak = max_collisions(matrix)

    print(f"  Peak-hour collisions in target cities: {len(filtered):,}")
    print(f"  Matrix cells: {len(matrix)} "
          f"({len(config['target_cities'])} cities x {len(config['peak_hours'])} hours)")
    print(f"  Max collisions per cell: {peak}")

    return matrix, peak


def transform(csv_path, config):
    """Load a collision CSV and reduce it to the peak-hour matrix."""
    records = load_collisions(csv_path)
    return build_matrix(records, config)
