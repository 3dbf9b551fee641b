import datetime as _dt
import math
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

from config import SimulationInput
from simulation import ProjectionResult


def js_round(value: float) -> int:
    """Rounds half up (2.5 -> 3, -2.5 -> -2), unlike Python's ``round``."""
    return int(math.floor(value + 0.5))


def add_commas(number: Union[int, float]) -> str:
    """1234567 -> '1,234,567'."""
    if isinstance(number, float) and number.is_integer():
        number = int(number)
    return f"{number:,}"


def _number_text(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def abbreviate_number(number: float) -> str:
    """Shortens a dollar amount for axis labels, judged by how many characters it prints as."""
    length = len(_number_text(number))
    if length > 12:
        return f"{_number_text(number / 1_000_000_000_000)} TRIL"
    if length > 10:
        return f"{_number_text(number / 1_000_000_000)}BIL"
    if length > 7:
        return f"{_number_text(number / 1_000_000)} MIL"
    return f"{_number_text(number / 1_000)} K"


class CompoundingStats(BaseModel):
    """Statistics for one year of a projection, as shown in the tooltip and sidebar."""

    index: int
    is_final_year: bool
    year: int
    earnings: int
    invested: int
    growth_per_dollar: Optional[int]
    taxes_paid: int

    def labeled_values(self) -> List[Tuple[str, str]]:
        growth = (
            f"${add_commas(self.growth_per_dollar)}"
            if self.growth_per_dollar is not None
            else "N/A"
        )
        return [
            (
                "Final Earnings" if self.is_final_year else "Earnings",
                f"${add_commas(self.earnings)}",
            ),
            (
                "Retirement Year" if self.is_final_year else "Current Year",
                str(self.year),
            ),
            ("Money Invested", f"${add_commas(self.invested)}"),
            ("Growth of one invested dollar", growth),
            ("Taxes Paid", f"${add_commas(self.taxes_paid)}"),
        ]


def compute_stats(
    index: int,
    result: ProjectionResult,
    params: Union[SimulationInput, Mapping[str, Any]],
    start_year: Optional[int] = None,
) -> CompoundingStats:
    """
    Derives the displayed statistics for year offset ``index``.

    Raises:
        IndexError: If ``index`` is outside ``0..years_to_retirement``.
    """
    if not isinstance(params, SimulationInput):
        params = SimulationInput.from_params(params)
    if not 0 <= index <= result.years:
        raise IndexError(f"Year index {index} outside 0..{result.years}")
    if start_year is None:
        start_year = _dt.date.today().year

    earnings = js_round(result.balance[index])
    invested = js_round(params.annual_contribution) * index
    growth_per_dollar = js_round(earnings / invested) if invested else None
    is_final_year = index == params.years_to_retirement

    return CompoundingStats(
        index=index,
        is_final_year=is_final_year,
        year=start_year + index,
        earnings=earnings,
        invested=invested,
        growth_per_dollar=growth_per_dollar,
        taxes_paid=js_round(result.tax_paid[index]),
    )


def summary_stats(
    result: ProjectionResult,
    params: Union[SimulationInput, Mapping[str, Any]],
    start_year: Optional[int] = None,
) -> CompoundingStats:
    return compute_stats(result.years, result, params, start_year)
