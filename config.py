"""Default heatmap settings and loading of JSON overrides."""

import copy
import json

from matplotlib.colors import is_color_like

TOTAL_LABEL = 'Total'

# Peak hours are listed explicitly: 7-9 AM and 5-7 PM.
DEFAULT_CONFIG = {
    'target_cities': [
        'Wandsworth', 'Enfield', 'Croydon', 'Redcar and Cleveland',
        'Lambeth', 'Hartlepool', 'Hackney', 'Newham',
    ],
    'peak_hours': [7, 8, 9, 17, 18, 19],
    'title': 'Collisions by City during Peak Hours (7-9 AM & 5-7 PM)',
    'low_color': '#f0f9ff',
    'high_color': '#dc2626',
}


def validate_config(config):
    """Raise ValueError if the config can't drive the transform."""
    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    cities = config['target_cities']
    if not isinstance(cities, (list, tuple)) or not cities:
        raise ValueError("'target_cities' must be a non-empty list of names")
    if any(not isinstance(c, str) for c in cities):
        raise ValueError("'target_cities' must contain strings only")
    if len(set(cities)) != len(cities):
        raise ValueError("'target_cities' contains duplicates")
    # The summary table uses this label for its totals row
    if TOTAL_LABEL in cities:
        raise ValueError(f"'target_cities' can't contain {TOTAL_LABEL!r}")

    hours = config['peak_hours']
    if not isinstance(hours, (list, tuple)) or not hours:
        raise ValueError("'peak_hours' must be a non-empty list of integers")
    # bool is an int subclass, but true/false in JSON is never an hour
    if any(isinstance(h, bool) or not isinstance(h, int) for h in hours):
        raise ValueError("'peak_hours' must contain integers only")
    if len(set(hours)) != len(hours):
        raise ValueError("'peak_hours' contains duplicates")

    if not isinstance(config['title'], str):
        raise ValueError("'title' must be a string")
    for key in ('low_color', 'high_color'):
        if not is_color_like(config[key]):
            raise ValueError(f"{key!r} is not a valid colour: {config[key]!r}")

    return config


def load_config(path=None):
    """
    Return the default config, overridden by the keys of a JSON file.

    The file only needs the keys it changes, e.g.
    {"target_cities": ["Leeds", "Bradford"], "peak_hours": [8, 17]}
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return validate_config(config)

    with open(path) as f:
        overrides = json.load(f)
    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    config.update(overrides)
    return validate_config(config)
