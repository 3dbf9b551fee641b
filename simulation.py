import pandas as pd
from typing import Any, List, Mapping, Tuple, Union
from loguru import logger
from pydantic import BaseModel

from config import SimulationInput
from constants import COMPOUNDING_PERIODS_PER_YEAR
from tax_brackets import DEFAULT_TAX_BRACKETS, TaxBracketTable, get_bracket


def compound(
    amount: float,
    growth_percent: float,
    periods: int = COMPOUNDING_PERIODS_PER_YEAR,
) -> float:
    """Grows ``amount`` by one year of ``growth_percent``, compounded ``periods`` times."""
    rate = growth_percent / 100
    return amount * (1 + rate / periods) ** periods


class ProjectionResult(BaseModel):
    """
    Year-by-year balance and cumulative tax paid, indexed by years from today.

    Both sequences have ``years_to_retirement + 1`` entries and start at 0.
    """

    balance: Tuple[float, ...]
    tax_paid: Tuple[float, ...]

    model_config = {"frozen": True}

    @property
    def years(self) -> int:
        return len(self.balance) - 1

    @property
    def final_balance(self) -> float:
        return self.balance[-1]

    @property
    def total_tax_paid(self) -> float:
        return self.tax_paid[-1]

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame({"Balance": self.balance, "Tax Paid": self.tax_paid})
        df.index.name = "Year"
        return df


def project(
    params: Union[SimulationInput, Mapping[str, Any]],
    tax_table: TaxBracketTable = DEFAULT_TAX_BRACKETS,
) -> ProjectionResult:
    """
    Projects a retirement balance forward one year at a time.

    The same contribution goes in every year. With ``taxed_at_contribution``
    the contribution is taxed at the marginal rate of the annual income
    before it is invested; the lookup always uses the unchanged annual
    income, so every year lands in the same bracket. This is a simplified
    model, not a real tax calculation. Otherwise contributions are invested
    untaxed and, in the retirement year, the grown balance is taxed once at
    the rate of the previous year's balance.

    Args:
        params: A validated ``SimulationInput`` or a mapping of its fields.
        tax_table: Marginal brackets to apply.

    Returns:
        A fresh ``ProjectionResult``.

    Raises:
        InvalidInputError: If ``params`` is a mapping that fails validation.
    """
    if not isinstance(params, SimulationInput):
        params = SimulationInput.from_params(params)

    years_to_retirement = params.years_to_retirement
    contribution = params.annual_contribution
    growth = params.stock_growth_percent

    balance: List[float] = [compound(0.0, growth)]
    tax_paid: List[float] = [0.0]

    for year in range(1, years_to_retirement + 1):
        if params.taxed_at_contribution:
            rate, _ = get_bracket(tax_table, 0, params.annual_income)
        else:
            rate = 0.0

        taxed_contribution = contribution * (1 - rate)
        tax_paid.append(tax_paid[-1] + contribution - taxed_contribution)

        earned = compound(balance[year - 1] + taxed_contribution, growth)

        if not params.taxed_at_contribution and year == years_to_retirement:
            # Bracket comes from the prior year's balance, before this year's growth.
            withdrawal_rate, _ = get_bracket(tax_table, 0, balance[year - 1])
            tax_paid[year] = earned * withdrawal_rate
            earned = earned * (1 - withdrawal_rate)

        balance.append(earned)

    logger.debug(
        f"Projected {years_to_retirement} years "
        f"({'taxed at contribution' if params.taxed_at_contribution else 'taxed at withdrawal'}): "
        f"final balance ${balance[-1]:,.2f}, tax paid ${tax_paid[-1]:,.2f}"
    )
    return ProjectionResult(balance=tuple(balance), tax_paid=tuple(tax_paid))
