from config import ScenarioConfig
from plotting import plot_projection
from simulation import project


def test_plot_projection_writes_png(tmp_path, scenario_a_params, log_messages):
    config = ScenarioConfig(scenario="Chart", **scenario_a_params)
    filename = tmp_path / "charts" / "projection.png"

    plot_projection(project(config.simulation_input()), config, str(filename), start_year=2024)

    assert filename.exists()
    assert filename.stat().st_size > 0
    assert any("Projection plot saved to" in m for m in log_messages)


def test_plot_projection_for_withdrawal_account(tmp_path, scenario_a_params):
    config = ScenarioConfig(**dict(scenario_a_params, roth=False, retirement_age=25))
    filename = tmp_path / "withdrawal.png"

    plot_projection(project(config.simulation_input()), config, str(filename), dpi_setting=72)

    assert filename.exists()
