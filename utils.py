from typing import Optional
from loguru import logger

from config import ScenarioConfig
from derived_stats import summary_stats
from simulation import ProjectionResult


def log_input_parameters(config: ScenarioConfig) -> None:
    """Logs the input parameters for the projection."""
    logger.info(f"--- Input Parameters For Scenario: {config.Nickname} ---")
    config_as_dict_for_logging = config.model_dump(by_alias=False)
    for key, value in config_as_dict_for_logging.items():
        if key == "Nickname":
            continue
        if key == "tax_brackets":
            logger.info(f"{key.replace('_', ' ').title()}:")
            for rate, threshold in config.tax_table().brackets:
                logger.info(f"  - {rate * 100:.0f}% above ${threshold:,.0f}")
            if value is None:
                logger.info("  (default federal brackets)")
        elif key == "taxed_at_contribution":
            mode = "Roth-style, taxed at contribution" if value else "taxed at withdrawal"
            logger.info(f"Account Type: {mode}")
        elif "percent" in key:
            logger.info(f"{key.replace('_', ' ').title()}: {value:.2f}%")
        elif key == "annual_income":
            logger.info(f"{key.replace('_', ' ').title()}: ${value:,.2f}")
        else:
            logger.info(f"{key.replace('_', ' ').title()}: {value}")
    logger.info(
        f"Annual Contribution (Calculated): ${config.simulation_input().annual_contribution:,.2f}"
    )
    logger.info("--- End of Input Parameters ---")


def log_projection_results(
    config: ScenarioConfig,
    result: ProjectionResult,
    start_year: Optional[int] = None,
) -> None:
    """Logs the final results of the projection."""
    logger.info(f"--- Projection Results for Scenario: '{config.Nickname}' ---")
    logger.info(
        f"Years Until Retirement: {result.years} "
        f"(age {config.current_age} to {config.retirement_age})"
    )
    stats = summary_stats(result, config.simulation_input(), start_year)
    for label, value in stats.labeled_values():
        logger.info(f"{label}: {value}")

    milestones = sorted({result.years // 4, result.years // 2, (3 * result.years) // 4})
    logger.info("Balance Milestones ($):")
    for year in milestones:
        if 0 < year < result.years:
            logger.info(f"  Year {year}: {result.balance[year]:,.2f}")
