import pytest
from pydantic import ValidationError

from config import InvalidInputError, SimulationInput
from simulation import ProjectionResult, compound, project
from tax_brackets import TaxBracketTable


def test_compound_applies_one_year_of_growth():
    assert compound(100.0, 10) == pytest.approx(110.0)
    assert compound(0.0, 13) == 0.0


def test_compound_with_more_periods_grows_faster():
    assert compound(100.0, 12, periods=12) == pytest.approx(100 * (1.01 ** 12))
    assert compound(100.0, 12, periods=12) > compound(100.0, 12)


def test_sequences_cover_every_year_and_start_at_zero(scenario_a):
    result = project(scenario_a)
    assert result.years == 43
    assert len(result.balance) == 44
    assert len(result.tax_paid) == 44
    assert result.balance[0] == 0
    assert result.tax_paid[0] == 0


def test_roth_first_year_is_taxed_at_the_income_bracket(scenario_a):
    result = project(scenario_a)
    assert result.balance[1] == pytest.approx(13_000 * 0.78 * 1.13)
    assert result.balance[1] == pytest.approx(11_458.2)
    assert result.tax_paid[1] == pytest.approx(2_860)


def test_roth_applies_the_same_bracket_every_year(scenario_a):
    result = project(scenario_a)
    yearly_tax = [b - a for a, b in zip(result.tax_paid, result.tax_paid[1:])]
    assert all(t == pytest.approx(2_860) for t in yearly_tax)
    assert result.total_tax_paid == pytest.approx(2_860 * 43)


def test_roth_balance_never_decreases(scenario_a):
    result = project(scenario_a)
    assert all(b >= a for a, b in zip(result.balance, result.balance[1:]))


def test_income_below_lowest_threshold_pays_no_tax():
    params = SimulationInput(
        current_age=64,
        annual_income=1_000,
        invest_percent=100,
        stock_growth_percent=13,
    )
    result = project(params)
    assert result.years == 1
    assert result.tax_paid[1] == 0
    assert result.balance[1] == pytest.approx(1_130)


def test_withdrawal_account_is_taxed_only_in_the_final_year(scenario_a_params):
    params = dict(scenario_a_params, roth=False)
    result = project(params)

    assert all(t == 0 for t in result.tax_paid[:-1])
    assert result.tax_paid[-1] > 0
    assert result.balance[1] == pytest.approx(13_000 * 1.13)
    assert all(b >= a for a, b in zip(result.balance[:-1], result.balance[1:-1]))


def test_withdrawal_tax_uses_bracket_of_prior_balance(scenario_a_params):
    result = project(dict(scenario_a_params, roth=False))
    # The prior balance is in the millions, so the top bracket applies.
    assert result.balance[-2] > 609_351
    grown = result.tax_paid[-1] / 0.37
    assert result.balance[-1] == pytest.approx(grown * 0.63)


def test_short_horizon_withdrawal_uses_pre_growth_balance():
    # 10_000 / year at 10%: balance[1] = 11_000, grown final = 23_100.
    # The bracket comes from 11_000 (0.0), not from 23_100 (0.10).
    params = {
        "current_age": 63,
        "retirement_age": 65,
        "annual_income": 10_000,
        "invest_percent": 100,
        "stock_growth_percent": 10,
        "roth": False,
    }
    result = project(params)
    assert result.balance[1] == pytest.approx(11_000)
    assert result.balance[2] == pytest.approx(23_100)
    assert result.tax_paid[2] == 0


def test_projection_is_repeatable(scenario_a):
    assert project(scenario_a) == project(scenario_a)


def test_retirement_age_sets_the_horizon(scenario_a_params):
    result = project(dict(scenario_a_params, retirement_age=30))
    assert result.years == 8
    assert len(result.balance) == 9


def test_custom_tax_table():
    table = TaxBracketTable.from_mapping({0.0: 0, 0.5: 1})
    params = SimulationInput(
        current_age=60, annual_income=10_000, invest_percent=10, stock_growth_percent=10
    )
    result = project(params, table)
    assert result.balance[1] == pytest.approx(1_000 * 0.5 * 1.1)
    assert result.tax_paid[1] == pytest.approx(500)


@pytest.mark.parametrize(
    "override",
    [
        {"current_age": 65},
        {"current_age": 70, "retirement_age": 65},
        {"current_age": 0},
        {"retirement_age": 96},
        {"annual_income": 0},
        {"annual_income": -1},
        {"invest_percent": 0},
        {"invest_percent": 101},
        {"stock_growth_percent": 0.5},
        {"stock_growth_percent": 81},
        {"annual_income": float("inf")},
        {"annual_income": float("nan")},
        {"stock_growth_percent": float("nan")},
    ],
)
def test_invalid_inputs_raise(scenario_a_params, override):
    with pytest.raises(InvalidInputError):
        project(dict(scenario_a_params, **override))


def test_missing_input_raises(scenario_a_params):
    params = dict(scenario_a_params)
    del params["annual_income"]
    with pytest.raises(InvalidInputError, match="annual_income"):
        project(params)


def test_result_is_immutable(scenario_a):
    result = project(scenario_a)
    with pytest.raises(ValidationError):
        result.balance = (1.0,)


def test_to_dataframe(scenario_a):
    df = project(scenario_a).to_dataframe()
    assert list(df.columns) == ["Balance", "Tax Paid"]
    assert df.index.name == "Year"
    assert len(df) == 44
    assert df["Balance"].iloc[1] == pytest.approx(11_458.2)


def test_result_properties():
    result = ProjectionResult(balance=(0.0, 10.0, 25.0), tax_paid=(0.0, 1.0, 3.0))
    assert result.years == 2
    assert result.final_balance == 25.0
    assert result.total_tax_paid == 3.0
