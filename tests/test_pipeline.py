"""
Tests for the ordered charge pipeline

Run with: pytest tests/test_pipeline.py -v
"""

import math

import pytest

from charge_engine.calculation.models import (
    INVALID,
    DatasetEntry,
    FormulaCharge,
    RateTable,
    RateTableCharge,
    Tier,
)
from charge_engine.calculation.pipeline import calculate_charges


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def rate_tables() -> list:
    return [
        RateTable(name="Water", tiers=(Tier(range_width=10, unit_value=5), Tier(unit_value=2))),
        RateTable(name="Flat", tiers=(Tier(unit_value=1.5),)),
    ]


@pytest.fixture
def dataset() -> list:
    return [
        DatasetEntry(group="Meter Charge", name='1" or 25mm', value=3.0),
        DatasetEntry(group="Tax", name="VAT", value=0.12),
    ]


# =============================================================================
# TESTS: FORMULA CHAINS
# =============================================================================

class TestFormulaChains:

    def test_chained_formulas(self):
        charges = [
            FormulaCharge(name="charge1", expression="<Consumption>*2"),
            FormulaCharge(name="charge2", expression="<charge1>+1"),
        ]
        result = calculate_charges(charges, [], [], 5)

        assert result.as_pairs() == [("charge1", 10), ("charge2", 11)]
        assert result.grand_total == 21

    def test_invalid_formula_contributes_zero(self):
        charges = [
            FormulaCharge(name="base", expression="<Consumption>"),
            FormulaCharge(name="broken", expression="<x> +"),
            FormulaCharge(name="after", expression="<broken> + <base>"),
        ]
        result = calculate_charges(charges, [], [], 7)

        assert result.get("broken") is INVALID
        # broken is merged as 0 for later charges
        assert result.get("after") == 7
        assert result.grand_total == 14

    def test_forward_reference_is_invalid(self):
        charges = [
            FormulaCharge(name="early", expression="<late> * 2"),
            FormulaCharge(name="late", expression="3"),
        ]
        result = calculate_charges(charges, [], [], 0)

        assert result.get("early") is INVALID
        assert result.get("late") == 3
        assert result.grand_total == 3

    def test_self_reference_is_invalid(self):
        charges = [FormulaCharge(name="loop", expression="<loop> + 1")]
        result = calculate_charges(charges, [], [], 0)

        assert result.get("loop") is INVALID
        assert result.grand_total == 0

    def test_forward_reference_is_logged(self, caplog):
        charges = [
            FormulaCharge(name="early", expression="<late>"),
            FormulaCharge(name="late", expression="1"),
        ]
        calculate_charges(charges, [], [], 0)
        assert "before they are calculated" in caplog.text

    def test_dataset_variables(self, dataset):
        charges = [
            FormulaCharge(name="Meter", expression='<Meter Charge_1" or 25mm>'),
            FormulaCharge(name="VAT", expression="<Meter> * <Tax_VAT>"),
        ]
        result = calculate_charges(charges, [], dataset, 0)

        assert result.get("Meter") == 3
        assert result.get("VAT") == pytest.approx(0.36)

    def test_nan_excluded_from_total(self):
        charges = [
            FormulaCharge(name="nan", expression="0 / 0"),
            FormulaCharge(name="one", expression="1"),
        ]
        result = calculate_charges(charges, [], [], 0)

        assert math.isnan(result.get("nan"))
        assert result.grand_total == 1

    def test_deeply_nested_formula_does_not_stop_the_bill(self):
        charges = [
            FormulaCharge(name="deep", expression="(" * 400 + "1" + ")" * 400),
            FormulaCharge(name="after", expression="2"),
        ]
        result = calculate_charges(charges, [], [], 0)

        assert result.get("deep") is INVALID
        assert result.get("after") == 2
        assert result.grand_total == 2


# =============================================================================
# TESTS: RATE TABLE CHARGES
# =============================================================================

class TestRateTableCharges:

    def test_allocates_consumption(self, rate_tables):
        charges = [RateTableCharge(name="Basic", rate_table_name="Water", input_name="Consumption")]
        result = calculate_charges(charges, rate_tables, [], "23")

        assert result.get("Basic") == 31
        assert result.grand_total == 31

    def test_unknown_rate_table_is_zero(self, rate_tables, caplog):
        charges = [RateTableCharge(name="Basic", rate_table_name="Gas", input_name="Consumption")]
        result = calculate_charges(charges, rate_tables, [], 23)

        assert result.get("Basic") == 0
        assert "not found" in caplog.text

    def test_missing_input_is_zero(self, rate_tables):
        charges = [RateTableCharge(name="Basic", rate_table_name="Flat", input_name="Nope")]
        assert calculate_charges(charges, rate_tables, [], 23).get("Basic") == 0

    def test_input_can_be_earlier_charge(self, rate_tables):
        charges = [
            FormulaCharge(name="Billable", expression="<Consumption> - 3"),
            RateTableCharge(name="Usage", rate_table_name="Flat", input_name="Billable"),
        ]
        result = calculate_charges(charges, rate_tables, [], 13)

        assert result.get("Usage") == pytest.approx(15)

    def test_rate_table_result_feeds_formula(self, rate_tables):
        charges = [
            RateTableCharge(name="Basic", rate_table_name="Water", input_name="Consumption"),
            FormulaCharge(name="Surcharge", expression="<Basic> * 0.5"),
        ]
        result = calculate_charges(charges, rate_tables, [], 23)

        assert result.get("Surcharge") == 15.5
        assert result.grand_total == 46.5

    def test_empty_tier_list_is_zero(self):
        charges = [RateTableCharge(name="Basic", rate_table_name="Empty", input_name="Consumption")]
        result = calculate_charges(charges, [RateTable(name="Empty")], [], 10)
        assert result.get("Basic") == 0


# =============================================================================
# TESTS: PIPELINE PROPERTIES
# =============================================================================

class TestPipelineProperties:

    def test_identical_inputs_identical_output(self, rate_tables, dataset):
        charges = [
            RateTableCharge(name="Basic", rate_table_name="Water", input_name="Consumption"),
            FormulaCharge(name="Tax", expression="<Basic> * <Tax_VAT>"),
            FormulaCharge(name="Bad", expression="(("),
        ]
        first = calculate_charges(charges, rate_tables, dataset, 23)
        second = calculate_charges(charges, rate_tables, dataset, 23)

        assert first == second
        assert repr(first.as_pairs()) == repr(second.as_pairs())

    def test_results_in_declaration_order(self):
        charges = [FormulaCharge(name=n, expression="1") for n in ["z", "a", "m"]]
        result = calculate_charges(charges, [], [], 0)
        assert [c.name for c in result.charges] == ["z", "a", "m"]

    def test_duplicate_name_keeps_first_position(self):
        charges = [
            FormulaCharge(name="a", expression="1"),
            FormulaCharge(name="b", expression="<a> + 1"),
            FormulaCharge(name="a", expression="5"),
        ]
        result = calculate_charges(charges, [], [], 0)

        assert result.as_pairs() == [("a", 5), ("b", 2)]
        assert result.grand_total == 7

    def test_namespace_includes_charges(self, dataset):
        charges = [FormulaCharge(name="x", expression="<x2>")]
        result = calculate_charges(charges, [], dataset, 4)

        assert result.namespace["Consumption"] == 4
        assert result.namespace["x"] == 0
        assert result.get("x") is INVALID

    def test_non_numeric_consumption(self):
        charges = [FormulaCharge(name="c", expression="<Consumption> + 1")]
        assert calculate_charges(charges, [], [], "abc").get("c") == 1

    def test_no_charges(self):
        result = calculate_charges([], [], [], 10)
        assert result.charges == ()
        assert result.grand_total == 0

    def test_get_unknown_charge(self):
        assert calculate_charges([], [], [], 0).get("missing") is None
