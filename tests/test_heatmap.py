import pandas as pd
import pytest

from heatmap import (
    CELL_SIZE, DARK_TEXT, LIGHT_TEXT, MARGINS, WIDTH, band_positions,
    build_heatmap, cell_gid, city_slugs, color_scale, legend_values,
    text_color,
)

LOW = '#f0f9ff'
HIGH = '#dc2626'
CITIES = ['Enfield', 'Lambeth', 'Redcar and Cleveland']
HOURS = [7, 8, 17]


def make_matrix(counts):
    """counts: {(city, hour): n}; everything else is zero."""
    rows = [
        {'city': c, 'hour': h, 'collisions': counts.get((c, h), 0)}
        for c in CITIES for h in HOURS
    ]
    return pd.DataFrame(rows)


def of(commands, layer, kind=None):
    return [c for c in commands
            if c['layer'] == layer and (kind is None or c['kind'] == kind)]


class TestColorScale:
    def test_anchors(self):
        scale = color_scale(10, LOW, HIGH)
        assert scale(0) == LOW
        assert scale(10) == HIGH

    def test_midpoint_is_linear(self):
        scale = color_scale(2, '#000000', '#ffffff')
        assert scale(1) == '#808080'

    def test_clamped(self):
        scale = color_scale(10, LOW, HIGH)
        assert scale(-5) == LOW
        assert scale(50) == HIGH

    def test_zero_max_maps_to_low(self):
        scale = color_scale(0, LOW, HIGH)
        assert scale(0) == LOW
        assert scale(3) == LOW


def test_text_color_switches_above_half():
    assert text_color(6, 10) == LIGHT_TEXT
    assert text_color(5, 10) == DARK_TEXT
    assert text_color(1, 10) == DARK_TEXT


def test_band_positions_follow_order():
    assert band_positions([17, 7, 8], 180) == {17: 180, 7: 205, 8: 230}


def test_legend_values():
    assert legend_values(8) == [0, 2, 4, 6, 8]
    assert legend_values(0) == [0, 0, 0, 0, 0]


def test_cell_gid():
    assert cell_gid('Redcar and Cleveland', 7) == 'cell-redcar-and-cleveland-7'


def test_city_slugs_unique_for_lookalike_names():
    slugs = city_slugs(['St Helens', 'St. Helens', 'ST HELENS', 'Enfield'])
    assert slugs == {
        'St Helens': 'st-helens',
        'St. Helens': 'st-helens-2',
        'ST HELENS': 'st-helens-3',
        'Enfield': 'enfield',
    }


def test_cell_gids_unique_for_lookalike_cities():
    cities = ['St Helens', 'St. Helens']
    matrix = pd.DataFrame({'city': cities, 'hour': [8, 8], 'collisions': [1, 4]})
    commands = build_heatmap(matrix, cities, [8], 4)
    cells = of(commands, 'cells')
    assert [c['gid'] for c in cells] == ['cell-st-helens-8', 'cell-st-helens-2-8']
    assert [c['tooltip'] for c in cells] == [
        'St Helens\n8:00\nCollisions: 1',
        'St. Helens\n8:00\nCollisions: 4',
    ]


class TestBuildHeatmap:
    def test_one_cell_per_matrix_entry(self):
        commands = build_heatmap(make_matrix({}), CITIES, HOURS, 0)
        cells = of(commands, 'cells')
        assert len(cells) == len(CITIES) * len(HOURS)
        assert all(c['width'] == CELL_SIZE and c['height'] == CELL_SIZE for c in cells)

    def test_cell_positions(self):
        commands = build_heatmap(make_matrix({('Lambeth', 17): 3}), CITIES, HOURS, 3)
        cell = next(c for c in of(commands, 'cells') if c['gid'] == 'cell-lambeth-17')
        assert cell['x'] == MARGINS['left'] + 2 * CELL_SIZE
        assert cell['y'] == MARGINS['top'] + 1 * CELL_SIZE
        assert cell['fill'] == HIGH
        assert cell['stroke'] == 'white'
        assert cell['tooltip'] == 'Lambeth\n17:00\nCollisions: 3'

    def test_values_only_for_nonzero_cells(self):
        matrix = make_matrix({('Enfield', 8): 2, ('Lambeth', 7): 10})
        commands = build_heatmap(matrix, CITIES, HOURS, 10)
        values = of(commands, 'values')
        assert sorted(v['text'] for v in values) == ['10', '2']
        by_text = {v['text']: v for v in values}
        assert by_text['10']['fill'] == LIGHT_TEXT
        assert by_text['2']['fill'] == DARK_TEXT
        assert by_text['2']['x'] == MARGINS['left'] + CELL_SIZE + CELL_SIZE / 2
        assert by_text['2']['y'] == MARGINS['top'] + CELL_SIZE / 2

    def test_empty_matrix_renders_low_grid_without_values(self):
        commands = build_heatmap(make_matrix({}), CITIES, HOURS, 0)
        assert of(commands, 'values') == []
        assert {c['fill'] for c in of(commands, 'cells')} == {LOW}

    def test_axis_labels(self):
        commands = build_heatmap(make_matrix({}), CITIES, HOURS, 0)
        hour_labels = of(commands, 'hour-labels')
        assert [t['text'] for t in hour_labels] == ['7:00', '8:00', '17:00']
        assert all(t['y'] == MARGINS['top'] - 10 for t in hour_labels)
        city_labels = of(commands, 'city-labels')
        assert [t['text'] for t in city_labels] == CITIES
        assert all(t['anchor'] == 'end' for t in city_labels)

    def test_title_and_captions(self):
        commands = build_heatmap(make_matrix({}), CITIES, HOURS, 0, title='Peak collisions')
        assert [t['text'] for t in of(commands, 'title')] == ['Peak collisions']
        captions = {t['text']: t for t in of(commands, 'captions')}
        assert captions['City']['rotate'] == -90
        assert 'Hour of Day' in captions

    def test_legend_swatches_are_spaced(self):
        commands = build_heatmap(make_matrix({('Enfield', 7): 8}), CITIES, HOURS, 8)
        swatches = of(commands, 'legend', kind='rect')
        xs = [s['x'] for s in swatches]
        assert len(xs) == 5
        assert len(set(xs)) == 5
        assert xs == [WIDTH - 150 + i * 20 for i in range(5)]
        assert swatches[0]['fill'] == LOW
        assert swatches[-1]['fill'] == HIGH
        captions = [t['text'] for t in of(commands, 'legend', kind='text')]
        assert captions == ['Low', 'High']

    def test_legend_spaced_when_max_is_zero(self):
        commands = build_heatmap(make_matrix({}), CITIES, HOURS, 0)
        xs = [s['x'] for s in of(commands, 'legend', kind='rect')]
        assert xs == sorted(set(xs))

    def test_accepts_records(self):
        records = make_matrix({('Enfield', 7): 1}).to_dict('records')
        commands = build_heatmap(records, CITIES, HOURS, 1)
        assert len(of(commands, 'cells')) == 9

    @pytest.mark.parametrize('max_count', [0, 1, 7])
    def test_deterministic(self, max_count):
        matrix = make_matrix({('Enfield', 7): max_count})
        assert (build_heatmap(matrix, CITIES, HOURS, max_count)
                == build_heatmap(matrix, CITIES, HOURS, max_count))
