"""
Export of synthesized valleys to CSV files.
"""

from .csv_export import (
    OUTPUT_FILES,
    check_existing_outputs,
    export_csv,
    resolve_output_dir,
)

__all__ = ['OUTPUT_FILES', 'check_existing_outputs', 'export_csv', 'resolve_output_dir']
