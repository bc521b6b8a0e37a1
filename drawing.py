"""Put heatmap drawing commands on a matplotlib figure and save it."""

import os
import xml.etree.ElementTree as ET

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import seaborn as sns

from heatmap import WIDTH, HEIGHT

sns.set_theme(style="white")
# Keep text as <text> nodes so labels stay selectable in the SVG
plt.rcParams['svg.fonttype'] = 'none'

SVG_NS = 'http://www.w3.org/2000/svg'

# Canvas units are 1/100 inch; font sizes are given in canvas units
UNITS_PER_INCH = 100
POINTS_PER_UNIT = 72 / UNITS_PER_INCH

ANCHORS = {'start': 'left', 'middle': 'center', 'end': 'right'}
BASELINES = {'auto': 'baseline', 'middle': 'center'}


def draw_rect(ax, cmd):
    patch = Rectangle(
        (cmd['x'], cmd['y']), cmd['width'], cmd['height'],
        facecolor=cmd['fill'],
        edgecolor=cmd['stroke'] or 'none',
        linewidth=cmd['stroke_width'] * POINTS_PER_UNIT,
    )
    if cmd.get('gid'):
        patch.set_gid(cmd['gid'])
    ax.add_patch(patch)
    return patch


def draw_text(ax, cmd):
    # SVG rotates clockwise, matplotlib counter-clockwise
    return ax.text(
        cmd['x'], cmd['y'], cmd['text'],
        ha=ANCHORS[cmd['anchor']],
        va=BASELINES[cmd['baseline']],
        fontsize=cmd['font_size'] * POINTS_PER_UNIT,
        fontweight=cmd['font_weight'],
        color=cmd['fill'],
        rotation=-cmd['rotate'],
        rotation_mode='anchor',
    )


DRAWERS = {
    'rect': draw_rect,
    'text': draw_text,
}


def render_figure(commands, width=WIDTH, height=HEIGHT):
    """Build a figure whose data coordinates match the canvas."""
    fig = plt.figure(figsize=(width / UNITS_PER_INCH, height / UNITS_PER_INCH))
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis('off')

    for cmd in commands:
        drawer = DRAWERS.get(cmd['kind'])
        if drawer is None:
            plt.close(fig)
            raise ValueError(f"Unknown drawing command: {cmd['kind']!r}")
        drawer(ax, cmd)

    return fig


def add_svg_tooltips(svg_path, tooltips):
    """
    Give SVG groups a <title> child so browsers show it on hover.

    tooltips maps group id -> tooltip text. Returns the number of groups
    that received a tooltip.
    """
    ET.register_namespace('', SVG_NS)
    ET.register_namespace('xlink', 'http://www.w3.org/1999/xlink')
    tree = ET.parse(svg_path)

    added = 0
    for group in tree.getroot().iter(f'{{{SVG_NS}}}g'):
        text = tooltips.get(group.get('id'))
        if text is None:
            continue
        title = ET.Element(f'{{{SVG_NS}}}title')
        title.text = text
        group.insert(0, title)
        added += 1

    tree.write(svg_path, encoding='utf-8', xml_declaration=True)
    return added


def draw_heatmap(commands, output_path, width=WIDTH, height=HEIGHT, dpi=150):
    """Draw the commands and save to output_path (.svg or .png)."""
    fig = render_figure(commands, width, height)
    try:
        fig.savefig(output_path, dpi=dpi)
    finally:
        plt.close(fig)

    if os.path.splitext(output_path)[1].lower() == '.svg':
        tooltips = {
            cmd['gid']: cmd['tooltip'] for cmd in commands
            if cmd['kind'] == 'rect' and cmd.get('gid') and cmd.get('tooltip')
        }
        add_svg_tooltips(output_path, tooltips)

    print(f"  Saved: {output_path}")
    return output_path
