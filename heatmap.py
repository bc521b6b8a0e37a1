"""
Heatmap layout and colouring.

build_heatmap() turns a collision matrix into a flat list of drawing
commands (plain dicts) on a fixed 1000 x 500 canvas with y pointing down.
It computes geometry, colours and text only; drawing.py puts the commands
on a figure.

Command shapes:
    {'kind': 'rect', 'layer', 'x', 'y', 'width', 'height', 'fill',
     'stroke', 'stroke_width', 'gid', 'tooltip'}
    {'kind': 'text', 'layer', 'x', 'y', 'text', 'font_size', 'font_weight',
     'fill', 'anchor', 'baseline', 'rotate'}
"""

import re

import numpy as np
import pandas as pd
from matplotlib.colors import to_hex, to_rgb

from config import DEFAULT_CONFIG

WIDTH, HEIGHT = 1000, 500
MARGINS = {'top': 60, 'right': 30, 'bottom': 100, 'left': 180}
CELL_SIZE = 25

LEGEND_STEPS = 5
LEGEND_SWATCH = {'width': 20, 'height': 15}

DARK_TEXT = '#333'
LIGHT_TEXT = 'white'


def band_positions(values, origin, step=CELL_SIZE):
    """Start coordinate of each value's band, in the order given."""
    return {value: origin + i * step for i, value in enumerate(values)}


def color_scale(max_count, low=DEFAULT_CONFIG['low_color'],
                high=DEFAULT_CONFIG['high_color']):
    """
    Linear colour scale over [0, max_count] between two anchor colours.

    Values are interpolated channel by channel in RGB and clamped to the
    domain. With max_count == 0 every value maps to the low anchor.
    """
    low_rgb = np.array(to_rgb(low))
    high_rgb = np.array(to_rgb(high))

    def scale(value):
        if max_count <= 0:
            return to_hex(low_rgb)
        t = min(max(value / max_count, 0.0), 1.0)
        return to_hex(low_rgb + (high_rgb - low_rgb) * t)

    return scale


def text_color(collisions, max_count):
    """Light text on cells above half the maximum, dark text elsewhere."""
    return LIGHT_TEXT if collisions > max_count * 0.5 else DARK_TEXT


def legend_values(max_count, steps=LEGEND_STEPS):
    return [(i / (steps - 1)) * max_count for i in range(steps)]


def city_slug(city):
    return re.sub(r'[^a-z0-9]+', '-', str(city).lower()).strip('-')


def city_slugs(cities):
    """
    Map each city to a slug unique within cities.

    Names that slug alike ('St Helens', 'St. Helens') get -2, -3, ...
    in list order.
    """
    slugs = {}
    taken = set()
    for city in cities:
        base = city_slug(city)
        slug, n = base, 1
        while slug in taken:
            n += 1
            slug = f'{base}-{n}'
        taken.add(slug)
        slugs[city] = slug
    return slugs


def cell_gid(city, hour, slug=None):
    """SVG-safe group id for a cell, e.g. 'cell-redcar-and-cleveland-7'."""
    return f'cell-{slug or city_slug(city)}-{hour}'


def cell_tooltip(city, hour, collisions):
    return f'{city}\n{hour}:00\nCollisions: {collisions}'


def _text(layer, x, y, text, font_size=16, font_weight='normal', fill='black',
          anchor='start', baseline='auto', rotate=0):
    return {
        'kind': 'text', 'layer': layer, 'x': x, 'y': y, 'text': str(text),
        'font_size': font_size, 'font_weight': font_weight, 'fill': fill,
        'anchor': anchor, 'baseline': baseline, 'rotate': rotate,
    }


def _rect(layer, x, y, width, height, fill, stroke=None, stroke_width=0,
          gid=None, tooltip=None):
    return {
        'kind': 'rect', 'layer': layer, 'x': x, 'y': y,
        'width': width, 'height': height, 'fill': fill,
        'stroke': stroke, 'stroke_width': stroke_width,
        'gid': gid, 'tooltip': tooltip,
    }


def build_legend(max_count, scale, width=WIDTH, steps=LEGEND_STEPS):
    """Legend swatches laid out left to right, one swatch width apart."""
    commands = []
    for i, value in enumerate(legend_values(max_count, steps)):
        commands.append(_rect(
            'legend', width - 150 + i * LEGEND_SWATCH['width'], 10,
            LEGEND_SWATCH['width'], LEGEND_SWATCH['height'], scale(value),
        ))
    commands.append(_text('legend', width - 160, 35, 'Low', font_size=10))
    commands.append(_text('legend', width - 30, 35, 'High', font_size=10))
    return commands


def build_heatmap(matrix, cities, hours, max_count,
                  title=DEFAULT_CONFIG['title'],
                  low=DEFAULT_CONFIG['low_color'],
                  high=DEFAULT_CONFIG['high_color']):
    """Lay out the city x hour grid; returns a list of drawing commands."""
    cells = pd.DataFrame(matrix, columns=['city', 'hour', 'collisions'])
    scale = color_scale(max_count, low, high)
    x_pos = band_positions(hours, MARGINS['left'])
    y_pos = band_positions(cities, MARGINS['top'])
    slugs = city_slugs(cities)
    half = CELL_SIZE / 2

    commands = [_text('title', WIDTH / 2, 30, title, font_size=18,
                      font_weight='bold', anchor='middle')]

    for cell in cells.itertuples(index=False):
        n = int(cell.collisions)
        commands.append(_rect(
            'cells', x_pos[cell.hour], y_pos[cell.city], CELL_SIZE, CELL_SIZE,
            scale(n), stroke='white', stroke_width=1,
            gid=cell_gid(cell.city, cell.hour, slugs.get(cell.city)),
            tooltip=cell_tooltip(cell.city, cell.hour, n),
        ))

    # Zero cells carry no label
    for cell in cells[cells['collisions'] > 0].itertuples(index=False):
        n = int(cell.collisions)
        commands.append(_text(
            'values', x_pos[cell.hour] + half, y_pos[cell.city] + half, n,
            font_size=11, font_weight='bold', fill=text_color(n, max_count),
            anchor='middle', baseline='middle',
        ))

    for hour in hours:
        commands.append(_text('hour-labels', x_pos[hour] + half,
                              MARGINS['top'] - 10, f'{hour}:00',
                              font_size=12, anchor='middle'))

    for city in cities:
        commands.append(_text('city-labels', MARGINS['left'] - 10,
                              y_pos[city] + half, city, font_size=11,
                              anchor='end', baseline='middle'))

    commands.append(_text('captions', WIDTH / 2, HEIGHT - 10, 'Hour of Day',
                          font_weight='bold', anchor='middle'))
    commands.append(_text('captions', 20, HEIGHT / 2, 'City',
                          font_weight='bold', anchor='middle', rotate=-90))

    commands.extend(build_legend(max_count, scale))
    return commands
