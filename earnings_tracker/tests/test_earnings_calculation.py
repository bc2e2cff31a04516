import pytest

from earnings_tracker.services.earnings_service import calculate_earnings


def test_scenario_two_platforms_over_threshold():
    """
    Bolt 500 + Uber 600 = 1100 bruto:
    comisión 110, deducción fija 45, neto 945.
    """
    result = calculate_earnings(bolt_gross=500, uber_gross=600)
    assert result == {
        "total_earnings": 1100,
        "platform_fee": 110,
        "fixed_deduction": 45,
        "total_cash_earnings": 0,
        "net_earnings": 945,
    }


def test_cash_is_subtracted_from_net_but_not_charged_commission():
    result = calculate_earnings(bolt_gross=500, uber_gross=600, bolt_cash=50)
    assert result["platform_fee"] == 110
    assert result["total_cash_earnings"] == 50
    assert result["net_earnings"] == 895


def test_total_earnings_excludes_cash():
    result = calculate_earnings(bolt_gross=100, uber_gross=0, bolt_cash=30, uber_cash=20)
    assert result["total_earnings"] == 100
    assert result["total_cash_earnings"] == 50


@pytest.mark.parametrize("bolt_gross, uber_gross, expected", [
    (999, 0, 25),
    (499.5, 499.5, 25),
    (999.01, 0, 45),
    (500, 499.01, 45),
    (1000, 0, 45),
    (0, 0, 25),
])
def test_fixed_deduction_threshold(bolt_gross, uber_gross, expected):
    assert calculate_earnings(bolt_gross=bolt_gross, uber_gross=uber_gross)["fixed_deduction"] == expected


@pytest.mark.parametrize("bolt_gross, uber_gross, bolt_cash, uber_cash", [
    (0, 0, 0, 0),
    (123.45, 67.89, 10, 5.5),
    (999, 0.01, 0, 0),
    (2500, 1800.75, 300, 120.25),
    (0.1, 0.2, 0, 0),
])
def test_fee_and_net_follow_the_formula(bolt_gross, uber_gross, bolt_cash, uber_cash):
    result = calculate_earnings(bolt_gross, uber_gross, bolt_cash, uber_cash)
    gross = bolt_gross + uber_gross

    assert result["platform_fee"] == pytest.approx(0.10 * gross)
    assert result["fixed_deduction"] in (25, 45)
    assert result["net_earnings"] == pytest.approx(
        gross - result["platform_fee"] - result["fixed_deduction"] - (bolt_cash + uber_cash))


def test_net_can_be_negative():
    result = calculate_earnings(bolt_gross=100, bolt_cash=200)
    assert result["net_earnings"] == 100 - 10 - 25 - 200


def test_all_zero_inputs():
    result = calculate_earnings()
    assert result["fixed_deduction"] == 25
    assert result["net_earnings"] == -25
