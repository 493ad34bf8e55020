import pytest

from astrolab.sandbox import (
    SandboxParams,
    deflection_delta_v,
    format_result,
    miss_distance_km,
    run_simulation,
)


def test_default_parameters_match_reference_impactor() -> None:
    result = run_simulation(SandboxParams())
    assert result.crater_diameter == 1.9
    assert result.deflection_success == 78
    assert result.megatons == pytest.approx(47_500, rel=0.01)
    assert result.seismic_magnitude == 10.3


def test_parameters_are_clamped_to_slider_ranges() -> None:
    result = run_simulation(SandboxParams(diameter=5, velocity=99, lead_months=40))
    assert result.params == SandboxParams(diameter=100.0, velocity=50.0, lead_months=12)
    assert result.deflection_success == 100


def test_bigger_bodies_are_harder_to_deflect() -> None:
    small = run_simulation(SandboxParams(diameter=400))
    large = run_simulation(SandboxParams(diameter=1500))
    assert small.deflection_success > large.deflection_success
    assert deflection_delta_v(780) == pytest.approx(0.315)


def test_miss_distance_grows_linearly_with_lead_time() -> None:
    one = miss_distance_km(0.5, 1)
    assert miss_distance_km(0.5, 6) == pytest.approx(one * 6)
    assert miss_distance_km(-0.5, 6) == pytest.approx(one * 6)
    assert miss_distance_km(0.5, 0) == 0


def test_format_result_lists_inputs_and_outputs() -> None:
    lines = format_result(run_simulation(SandboxParams(lead_months=3)))
    assert "  DEFLECTION TIME: 3 MONTHS" in lines
    assert "  DEFLECTION SUCCESS: 39%" in lines
    assert lines[0] == "IMPACT SIMULATOR"
