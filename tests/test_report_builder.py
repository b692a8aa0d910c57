"""
Tests for the report builder service
"""
from datetime import date

import pytest

from src.analysis.aging_estimator import AgingEstimator, EstimationInput, StatusTier
from src.analysis.chemistry import ChemistryKey, UnknownChemistryError, get_profile
from src.services.report_builder import (
    FormValidationError,
    build_report_text,
    format_loss,
    loss_bar_width,
    parse_estimation_form,
    status_display,
)


@pytest.fixture
def lead_example():
    """Lead-acid reference battery with its estimate"""
    inputs = EstimationInput(
        chemistry_key=ChemistryKey.LEAD,
        design_capacity_ah=100,
        age_months=12,
        cycle_count=200,
        ambient_temp_c=25,
        depth_of_discharge_percent=80,
        charge_rate_c=0.5
    )
    profile = get_profile(ChemistryKey.LEAD)
    return inputs, profile, AgingEstimator().estimate(inputs, profile)


class TestParseEstimationForm:
    """Test form value parsing"""

    def test_valid_form(self):
        inputs = parse_estimation_form({
            "chemistry_key": "nmc",
            "design_capacity_ah": "60",
            "age_months": "18.5",
            "cycle_count": " 300 ",
            "ambient_temp_c": "-5",
            "depth_of_discharge_percent": "70",
            "charge_rate_c": "1.2",
        })

        assert inputs.chemistry_key == ChemistryKey.NMC
        assert inputs.design_capacity_ah == 60.0
        assert inputs.age_months == 18.5
        assert inputs.cycle_count == 300.0
        assert inputs.ambient_temp_c == -5.0
        assert inputs.depth_of_discharge_percent == 70.0
        assert inputs.charge_rate_c == 1.2

    def test_slider_defaults(self):
        inputs = parse_estimation_form(
            {
                "design_capacity_ah": "100",
                "age_months": "12",
                "cycle_count": "200",
                "ambient_temp_c": "25",
                "charge_rate_c": "",
            },
            default_dod_percent=60,
            default_charge_rate_c=0.3
        )

        assert inputs.chemistry_key == ChemistryKey.LEAD
        assert inputs.depth_of_discharge_percent == 60
        assert inputs.charge_rate_c == 0.3

    def test_missing_and_non_numeric_fields(self):
        with pytest.raises(FormValidationError) as exc_info:
            parse_estimation_form({
                "design_capacity_ah": "100",
                "age_months": "",
                "cycle_count": "lots",
            })

        assert exc_info.value.fields == ["age_months", "cycle_count", "ambient_temp_c"]
        assert "ambient temperature" in str(exc_info.value)
        assert isinstance(exc_info.value, ValueError)

    def test_non_finite_rejected(self):
        with pytest.raises(FormValidationError) as exc_info:
            parse_estimation_form({
                "design_capacity_ah": "nan",
                "age_months": "inf",
                "cycle_count": "10",
                "ambient_temp_c": "25",
                "depth_of_discharge_percent": "deep",
            })

        assert exc_info.value.fields == [
            "design_capacity_ah", "age_months", "depth_of_discharge_percent"
        ]

    @pytest.mark.parametrize("field,value", [
        ("design_capacity_ah", "0"),
        ("design_capacity_ah", "-5"),
        ("age_months", "-1"),
        ("cycle_count", "-10"),
        ("ambient_temp_c", "-273.15"),
        ("ambient_temp_c", "-273.2"),
        ("depth_of_discharge_percent", "-10"),
        ("depth_of_discharge_percent", "100.5"),
        ("charge_rate_c", "-0.5"),
    ])
    def test_out_of_range_rejected(self, field, value):
        fields = {
            "design_capacity_ah": "100",
            "age_months": "12",
            "cycle_count": "200",
            "ambient_temp_c": "25",
            "depth_of_discharge_percent": "80",
            "charge_rate_c": "0.5",
        }
        fields[field] = value

        with pytest.raises(FormValidationError) as exc_info:
            parse_estimation_form(fields)

        assert exc_info.value.fields == [field]

    def test_range_edges_accepted(self):
        inputs = parse_estimation_form({
            "design_capacity_ah": "0.1",
            "age_months": "0",
            "cycle_count": "0",
            "ambient_temp_c": "-273.1",
            "depth_of_discharge_percent": "100",
            "charge_rate_c": "0",
        })

        assert inputs.depth_of_discharge_percent == 100
        assert inputs.ambient_temp_c == -273.1

    def test_unknown_chemistry(self):
        with pytest.raises(UnknownChemistryError):
            parse_estimation_form({
                "chemistry_key": "nicd",
                "design_capacity_ah": "100",
                "age_months": "12",
                "cycle_count": "200",
                "ambient_temp_c": "25",
            })


class TestPresentation:
    """Test status display and loss bars"""

    def test_status_colors(self):
        assert status_display(StatusTier.GOOD).color == "#4caf50"
        assert status_display(StatusTier.DEGRADED).color == "#ff9800"
        assert status_display(StatusTier.END_OF_LIFE).color == "#f44336"
        assert status_display(StatusTier.END_OF_LIFE).icon == "🔴"

    def test_loss_bar_width(self):
        assert loss_bar_width(0) == 0
        assert loss_bar_width(10) == pytest.approx(25.0)
        assert loss_bar_width(40) == pytest.approx(100.0)
        assert loss_bar_width(85) == 100.0
        assert loss_bar_width(10, full_scale_percent=20) == pytest.approx(50.0)

    def test_format_loss(self):
        assert format_loss(1.2124) == "-1.2%"
        assert format_loss(0) == "-0.0%"


class TestReportText:
    """Test the shareable report"""

    def test_report_contents(self, lead_example):
        inputs, profile, result = lead_example

        text = build_report_text(
            inputs, profile, result,
            label="Warehouse forklift",
            report_date=date(2026, 1, 15)
        )

        assert text.startswith("[Battery Health Report]")
        assert "Date: 2026-01-15" in text
        assert "Label: Warehouse forklift" in text
        assert "Battery: Lead-Acid (100Ah)" in text
        assert "Result: 90.9% (🟢 Good condition)" in text
        assert "Current capacity: 90.9 Ah" in text
        assert "Usage history: 12 months / 200 cycles" in text
        assert "DOD 80%, temperature 25°C" in text
        assert "Calendar aging: -1.2%" in text
        assert "Cycle aging: -7.9%" in text
        assert "Primary cause: frequent charge/discharge cycling" in text

    def test_placeholder_label(self, lead_example):
        inputs, profile, result = lead_example

        assert "Label: Unnamed battery" in build_report_text(inputs, profile, result, label="  ")
        assert "Label: Spare" in build_report_text(
            inputs, profile, result, label_placeholder="Spare"
        )

    def test_defaults_to_today(self, lead_example):
        inputs, profile, result = lead_example

        text = build_report_text(inputs, profile, result)

        assert f"Date: {date.today().isoformat()}" in text

    def test_fractional_inputs_echoed(self):
        inputs = EstimationInput(
            chemistry_key=ChemistryKey.LFP,
            design_capacity_ah=7.5,
            age_months=18.5,
            cycle_count=420,
            ambient_temp_c=31.5,
            depth_of_discharge_percent=65,
            charge_rate_c=0.3
        )
        profile = get_profile(ChemistryKey.LFP)
        result = AgingEstimator().estimate(inputs, profile)

        text = build_report_text(inputs, profile, result)

        assert "Lithium Iron Phosphate (LFP) (7.5Ah)" in text
        assert "18.5 months / 420 cycles" in text
        assert "temperature 31.5°C" in text

    def test_inputs_echoed_exactly(self):
        inputs = EstimationInput(
            chemistry_key=ChemistryKey.NMC,
            design_capacity_ah=100.12345,
            age_months=240,
            cycle_count=1234567,
            ambient_temp_c=25,
            depth_of_discharge_percent=80,
            charge_rate_c=0.5
        )
        profile = get_profile(ChemistryKey.NMC)
        result = AgingEstimator().estimate(inputs, profile)

        text = build_report_text(inputs, profile, result)

        assert "(100.12345Ah)" in text
        assert "240 months / 1234567 cycles" in text
