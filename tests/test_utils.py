from config import ScenarioConfig
from simulation import project
from utils import log_input_parameters, log_projection_results


def test_log_input_parameters(scenario_a_params, log_messages):
    config = ScenarioConfig(scenario="Logged", **scenario_a_params)
    log_input_parameters(config)

    assert "--- Input Parameters For Scenario: Logged ---" in log_messages
    assert "Annual Income: $65,000.00" in log_messages
    assert "Invest Percent: 20.00%" in log_messages
    assert "Account Type: Roth-style, taxed at contribution" in log_messages
    assert "  - 22% above $47,151" in log_messages
    assert "Annual Contribution (Calculated): $13,000.00" in log_messages


def test_log_projection_results(scenario_a_params, log_messages):
    config = ScenarioConfig(scenario="Logged", **scenario_a_params)
    result = project(config.simulation_input())
    log_projection_results(config, result, start_year=2024)

    assert "Years Until Retirement: 43 (age 22 to 65)" in log_messages
    assert "Retirement Year: 2067" in log_messages
    assert any(m.startswith("Final Earnings: $") for m in log_messages)
    assert any(m.startswith("  Year 21: ") for m in log_messages)
