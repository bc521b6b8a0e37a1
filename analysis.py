#!/usr/bin/env python3
"""
Peak-Hour Collision Heatmap
===========================
Counts road collisions by city and hour of day for a fixed set of target
cities during peak hours (7-9 AM and 5-7 PM), and renders the counts as a
city x hour heatmap.

Data Source:
- Collisions: transformed 2024 collision extract with the columns
  local_authority_highway, time, collision_severity, number_of_casualties,
  number_of_vehicles, longitude, latitude

Usage:
    python3 analysis.py                               # Uses data/collisions_2024_transformed_data.csv
    python3 analysis.py --data /path/to/collisions.csv
    python3 analysis.py --output-dir ./out --format png
    python3 analysis.py --config cities.json          # Other cities / peak hours
    python3 analysis.py --json-only                   # Only output JSON (for web app)
"""

import argparse
import json
import os
import sys

from collisions import ResourceLoadError, load_collisions, build_matrix
from config import TOTAL_LABEL, load_config
from drawing import draw_heatmap
from heatmap import build_heatmap, cell_tooltip

DEFAULT_DATA = os.path.join('data', 'collisions_2024_transformed_data.csv')


def summarize(matrix, cities, hours):
    """Pivot the matrix to city x hour with row and column totals, and print it."""
    print("\n" + "=" * 70)
    print("[3] PEAK-HOUR SUMMARY")
    print("=" * 70)

    table = matrix.pivot(index='city', columns='hour', values='collisions')
    table = table.reindex(index=cities, columns=hours)
    table[TOTAL_LABEL] = table.sum(axis=1)
    table.loc[TOTAL_LABEL] = table.sum(axis=0)
    table.columns = [c if c == TOTAL_LABEL else f'{c}:00' for c in table.columns]

    print("\n--- Collisions by City and Hour ---")
    print(table.to_string())

    busiest = matrix[matrix['collisions'] > 0].nlargest(5, 'collisions')
    if busiest.empty:
        print("\n  No collisions matched the target cities and peak hours.")
    else:
        print("\n--- Busiest City/Hour Cells ---")
        for _, row in busiest.iterrows():
            print(f"  {row['city']:<24} {int(row['hour']):>2}:00  {int(row['collisions']):>6,}")

    return table


def export_json(matrix, max_count, output_dir):
    """Export heatmap cells as JSON for the web app."""
    records = []
    for _, row in matrix.iterrows():
        records.append({
            'city': row['city'],
            'hour': int(row['hour']),
            'collisions': int(row['collisions']),
            'tooltip': cell_tooltip(row['city'], row['hour'], row['collisions']),
        })

    payload = {'max_collisions': int(max_count), 'cells': records}
    json_path = os.path.join(output_dir, 'heatmap_data.json')
    with open(json_path, 'w') as f:
        json.dump(payload, f, indent=2)
    print(f"  Saved: {json_path} ({len(records)} cells)")
    return payload


def export_csv(table, output_dir):
    """Export the city x hour table."""
    csv_path = os.path.join(output_dir, 'heatmap_matrix.csv')
    table.to_csv(csv_path, index_label='city')
    print(f"  Saved: {csv_path}")
    return csv_path


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Peak-Hour Collision Heatmap'
    )
    parser.add_argument('--data', default=DEFAULT_DATA,
                        help=f'Collision CSV file (default: {DEFAULT_DATA})')
    parser.add_argument('--output-dir', default='output',
                        help='Directory for output files (default: output/)')
    parser.add_argument('--config', default=None,
                        help='JSON file overriding target cities, peak hours, title or colours')
    parser.add_argument('--format', choices=['svg', 'png'], default='svg',
                        help='Heatmap file format (default: svg)')
    parser.add_argument('--dpi', type=int, default=150,
                        help='Resolution for PNG output (default: 150)')
    parser.add_argument('--json-only', action='store_true',
                        help='Only export JSON (skip the heatmap and CSV)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    print("=" * 70)
    print("PEAK-HOUR COLLISION HEATMAP")
    print("Collisions by City and Hour of Day")
    print("=" * 70)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading config: {e}")
        return 2

    cities = config['target_cities']
    hours = config['peak_hours']

    print("\n[1] Loading dataset...")
    try:
        records = load_collisions(args.data)
    except ResourceLoadError as e:
        print(f"Error loading data: {e}")
        return 1

    print("\n[2] Aggregating peak-hour collisions...")
    matrix, max_count = build_matrix(records, config)

    os.makedirs(args.output_dir, exist_ok=True)

    if args.json_only:
        print("\n[3] Exporting data...")
        export_json(matrix, max_count, args.output_dir)
    else:
        table = summarize(matrix, cities, hours)

        print("\n[4] Exporting data...")
        export_json(matrix, max_count, args.output_dir)
        export_csv(table, args.output_dir)

        print("\n[5] Rendering heatmap...")
        commands = build_heatmap(
            matrix, cities, hours, max_count,
            title=config['title'],
            low=config['low_color'],
            high=config['high_color'],
        )
        figure_path = os.path.join(args.output_dir, f'collision_heatmap.{args.format}')
        draw_heatmap(commands, figure_path, dpi=args.dpi)

    print("\n" + "=" * 70)
    print("ANALYSIS COMPLETE")
    print("=" * 70)
    print(f"\n  Cells: {len(matrix)}  Max collisions: {max_count}")
    print(f"  Output directory: {args.output_dir}/")
    return 0


if __name__ == '__main__':
    sys.exit(main())
