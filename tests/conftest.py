import copy

import pandas as pd
import pytest

from config import DEFAULT_CONFIG

HEADER = [
    'local_authority_highway', 'time', 'collision_severity',
    'number_of_casualties', 'number_of_vehicles', 'longitude', 'latitude',
]


def collision_row(city, time, severity='Slight'):
    return {
        'local_authority_highway': city,
        'time': time,
        'collision_severity': severity,
        'number_of_casualties': 1,
        'number_of_vehicles': 2,
        'longitude': -0.1,
        'latitude': 51.5,
    }


@pytest.fixture
def config():
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def write_csv(tmp_path):
    """Write collision rows to a CSV in tmp_path and return its path."""
    def _write(rows, name='collisions.csv'):
        path = tmp_path / name
        pd.DataFrame(rows, columns=HEADER).to_csv(path, index=False)
        return str(path)
    return _write


@pytest.fixture
def sample_csv(write_csv):
    return write_csv([
        collision_row('Enfield', '08:15'),
        collision_row('Enfield', '08:40', severity='Serious'),
        collision_row('Lambeth', '20:05'),
        collision_row('Hackney', '7:05'),
        collision_row('Camden', '08:00'),
        collision_row('Croydon', 'unknown'),
        collision_row('Newham', '18:30'),
        collision_row('Newham', '18:59'),
        collision_row('Newham', '18:01'),
    ])
