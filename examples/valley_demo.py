"""
Example generating a river valley for each cross-section shape.
"""

from pathlib import Path

import numpy as np

from py_riverbuilder.config import parse_input_text
from py_riverbuilder.core import LCGPRNG, RiverValleyGenerator

INPUT = Path(__file__).with_name("Input.txt")


def main():
    text = INPUT.read_text()

    for shape in ["SU", "AU", "TZ(5)"]:
        shaped = text.replace("Cross-Sectional Shape=AU", f"Cross-Sectional Shape={shape}")
        river_input = parse_input_text(shaped)

        model = RiverValleyGenerator(
            river_input.parameters, river_input.curves, LCGPRNG(seed=2024)
        ).generate()

        stats = model.statistics
        middle = model.station_count // 2
        print(f"\n{shape} cross-section")
        print("-" * 30)
        print(f"  Points: {len(model.points)} (expected {model.expected_rows})")
        print(f"  Sinuosity: {stats.sinuosity:.3f}")
        print(f"  Channel slope: {stats.channel_slope:.5f}")
        print(f"  Width mean/cv: {stats.width.mean:.2f} / {stats.width.cv:.3f}")
        print(f"  Depth mean/cv: {stats.depth.mean:.2f} / {stats.depth.cv:.3f}")
        print(f"  GCS -/+: {stats.negative_gcs_percent:.1f}% / {stats.positive_gcs_percent:.1f}%")
        print(f"  Middle section z: {np.round(model.sections.z[middle], 2)}")


if __name__ == "__main__":
    main()
