# retirement_projection - Retirement Compounding & Tax Projection
# Description: Projects a retirement balance year by year, applying marginal tax brackets
# either to each contribution (Roth-style) or once to the final balance.

import sys
import os
import datetime as _dt
from typing import List, Optional
from loguru import logger
from pydantic import ValidationError

from config import (
    ConfigurationError,
    InvalidInputError,
    ScenarioConfig,
    load_config_from_json,
)
from constants import DEFAULT_CONFIG_FILENAME
from plotting import plot_projection
from simulation import project
from utils import log_input_parameters, log_projection_results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution entry point.

    Loads the scenario configuration, runs the projection, logs the results
    and writes a CSV table plus an optional chart. Returns the exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    current_timestamp_str = _dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = f"ret_proj_log_{current_timestamp_str}.log"

    # Configure loguru
    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level="INFO",
        colorize=True,
    )
    logger.add(
        log_filename,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        level="INFO",
        rotation="10 MB",
    )

    logger.info(f"Logging initialized. Log file: {log_filename}")

    # --- LOAD CONFIGURATION FROM JSON ---
    if argv:
        json_filename = argv[0]
    else:
        json_filename = DEFAULT_CONFIG_FILENAME
        logger.info(
            f"No config file specified via argument. Defaulting to '{json_filename}'"
        )

    logger.info(f"Loading configuration from: {json_filename}")
    try:
        config_dict = load_config_from_json(json_filename)
        config = ScenarioConfig(**config_dict)
        params = config.simulation_input()
        logger.info(
            f"Configuration for scenario '{config.Nickname}' loaded and validated successfully."
        )
    except ConfigurationError as e:
        logger.error(f"Configuration file error: {e}")
        return 1
    except (ValidationError, InvalidInputError) as e:
        logger.error(f"Configuration validation error: {e}")
        return 1

    log_input_parameters(config)

    start_year = config.start_year or _dt.date.today().year
    result = project(params, config.tax_table())
    log_projection_results(config, result, start_year)

    safe_nickname = "".join(
        c if c.isalnum() or c in ["_", "-"] else "_" for c in config.Nickname
    )
    file_base = os.path.join(
        config.output_dir, f"ret_proj_{safe_nickname}_{current_timestamp_str}"
    )

    table = result.to_dataframe()
    table.insert(0, "Calendar Year", [start_year + i for i in table.index])
    csv_filename = f"{file_base}.csv"
    try:
        os.makedirs(config.output_dir, exist_ok=True)
        table.to_csv(csv_filename)
        logger.info(f"Projection table saved to {csv_filename}")
    except OSError as e:
        logger.error(f"Error saving projection table '{csv_filename}': {e}")
        return 1

    if config.plot:
        plot_projection(result, config, f"{file_base}.png", start_year)
    else:
        logger.info(f"Plotting disabled for '{config.Nickname}'.")

    logger.info(
        f"--- Main execution finished for scenario '{config.Nickname}'. Outputs in '{config.output_dir}'. Log: {log_filename} ---"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
