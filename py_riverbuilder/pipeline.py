"""
End-to-end run: input file in, CSV files and charts out.
"""

from pathlib import Path
from typing import Optional, Union

import structlog

from .config.config import Settings
from .config.input_file import load_input
from .core.lcg_prng import LCGPRNG
from .core.valley import RiverValleyGenerator, ValleyModel
from .export.csv_export import (
    OUTPUT_FILES,
    check_existing_outputs,
    export_csv,
    resolve_output_dir,
)

logger = structlog.get_logger()


def build_river_valley(
    input_path: Union[str, Path], settings: Optional[Settings] = None
) -> ValleyModel:
    """
    Generate a river valley from an input file and write its outputs.

    The existing-output check covers every output file, charts included,
    and runs before anything else.  Nothing is written unless parsing and
    synthesis both succeed, and files created by a run that fails while
    writing are removed again.

    Args:
        input_path: Path of the input file
        settings: Run settings; defaults are read from the environment

    Returns:
        The finished valley model

    Raises:
        RiverBuilderError: On any configuration, geometry or output problem
    """
    settings = settings or Settings()
    directory = resolve_output_dir(settings.output_dir)
    check_existing_outputs(directory, settings.overwrite, OUTPUT_FILES)

    river_input = load_input(input_path)
    logger.info("Generating river valley files", directory=str(directory))

    generator = RiverValleyGenerator(
        river_input.parameters, river_input.curves, LCGPRNG(settings.seed)
    )
    model = generator.generate()

    _write_outputs(model, directory, settings)
    logger.info("Done", directory=str(directory))
    return model


def _write_outputs(model: ValleyModel, directory: Path, settings: Settings) -> None:
    """Write charts then CSV files, removing new files if either step fails."""
    existing = {name for name in OUTPUT_FILES if (directory / name).exists()}
    try:
        if settings.write_charts:
            # Imported lazily so CSV-only runs never load matplotlib
            from .visualize.charts import render_charts

            render_charts(model, directory, settings.chart_dpi)
        export_csv(model, directory)
    except Exception:
        created = [name for name in OUTPUT_FILES if name not in existing]
        for name in created:
            (directory / name).unlink(missing_ok=True)
        logger.error("Writing outputs failed, removed partial files", directory=str(directory))
        raise
