import os
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from loguru import logger
from matplotlib.ticker import FuncFormatter
from typing import Optional

from config import ScenarioConfig
from constants import (
    BALANCE_AREA_COLOR,
    BALANCE_LINE_COLOR,
    TAX_LINE_COLOR,
    TEXT_OUTPUT_COLOR,
)
from derived_stats import abbreviate_number, summary_stats
from simulation import ProjectionResult


def plot_projection(
    result: ProjectionResult,
    input_config: ScenarioConfig,
    filename: str,
    start_year: Optional[int] = None,
    dpi_setting: int = 150,
):
    """
    Plots the projected balance with a shaded area, cumulative tax paid,
    a retirement-year marker and a summary text block.

    Args:
        result: Projection to draw.
        input_config: Scenario the projection was computed from.
        filename: The full path and filename to save the plot to.
        start_year: Calendar year of year offset 0.
        dpi_setting: The DPI (dots per inch) for the saved image.
    """
    stats = summary_stats(result, input_config.simulation_input(), start_year)
    first_year = stats.year - result.years

    plt.figure(figsize=(12, 7))
    ax = plt.gca()

    years_x_axis = np.arange(first_year, first_year + len(result.balance))
    balances = np.array(result.balance)
    taxes = np.array(result.tax_paid)

    # Stacked translucent fills fade the area towards the x axis.
    for alpha, scale in ((0.05, 1.0), (0.08, 0.66), (0.12, 0.33)):
        ax.fill_between(
            years_x_axis,
            0,
            balances * scale,
            color=BALANCE_AREA_COLOR,
            alpha=alpha,
            linewidth=0,
            label="_nolegend_",
        )
    ax.plot(
        years_x_axis,
        balances,
        color=BALANCE_LINE_COLOR,
        linewidth=2.75,
        alpha=0.85,
        label="Balance",
    )
    ax.plot(
        years_x_axis,
        taxes,
        color=TAX_LINE_COLOR,
        linewidth=1.4,
        linestyle="--",
        label="Taxes Paid (cumulative)",
    )
    ax.axvline(
        x=stats.year,
        color="black",
        linestyle=":",
        linewidth=1.2,
        label=f"Retirement ({stats.year})",
    )

    output_lines = [f"Scenario: {input_config.Nickname}"] + [
        f"{label}: {value}" for label, value in stats.labeled_values()
    ]
    for i, line_text in enumerate(output_lines):
        ax.text(
            0.02,
            0.97 - i * 0.04,
            line_text,
            transform=ax.transAxes,
            ha="left",
            va="top",
            fontsize=8,
            color=TEXT_OUTPUT_COLOR,
            fontweight="bold" if i == 0 else "normal",
            bbox=dict(
                facecolor="white",
                alpha=0.85,
                pad=2,
                edgecolor="lightgrey",
                boxstyle="round,pad=0.3",
            ),
        )

    def dollar_formatter(y_val, pos):
        return f"${abbreviate_number(y_val)}" if y_val > 0 else "$0"

    ax.yaxis.set_major_formatter(FuncFormatter(dollar_formatter))
    ax.set_xlim(left=years_x_axis[0], right=years_x_axis[-1])
    top = max(float(balances.max()), float(taxes.max()))
    ax.set_ylim(bottom=0, top=top * 1.05 if top > 0 else 1)

    ax.set_xlabel("Year", fontsize=9)
    ax.set_ylabel("Money made", fontsize=9)
    ax.set_title(f"Retirement Projection - Scenario: {input_config.Nickname}", fontsize=11)
    ax.tick_params(axis="both", which="major", labelsize=7)
    ax.grid(True, axis="y", linestyle=":", alpha=0.6)
    ax.legend(fontsize=7.5, loc="lower right")
    plt.tight_layout()

    # --- Save Plot ---
    try:
        file_directory = os.path.dirname(filename)
        if file_directory:
            os.makedirs(file_directory, exist_ok=True)

        plt.savefig(filename, dpi=dpi_setting)
        logger.info(f"Projection plot saved to {filename} (DPI: {dpi_setting})")
    except OSError as e:
        logger.opt(exception=True).error(f"Error saving projection plot '{filename}': {e}")
    finally:
        plt.close()
