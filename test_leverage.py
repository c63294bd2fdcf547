import math

import pytest

np = pytest.importorskip("numpy")

from finsim.leverage import LeverageKind, LeveragePolicy, accumulate, tick_multiplier
from finsim.params import ParameterError

RETURNS = [1.04, 1.01, 0.99, 0.98, 1.05, 1.1, 0.4]


def test_compound_accumulation_scenario():
    result = accumulate(RETURNS, LeveragePolicy.compound(), start_value=100.0)

    assert result.tolist() == [
        100.0 * 1.04,
        100.0 * 1.04 * 1.01,
        100.0 * 1.04 * 1.01 * 0.99,
        100.0 * 1.04 * 1.01 * 0.99 * 0.98,
        100.0 * 1.04 * 1.01 * 0.99 * 0.98 * 1.05,
        100.0 * 1.04 * 1.01 * 0.99 * 0.98 * 1.05 * 1.1,
        100.0 * 1.04 * 1.01 * 0.99 * 0.98 * 1.05 * 1.1 * 0.4,
    ]


def test_none_policy_passes_returns_through():
    result = accumulate(RETURNS, LeveragePolicy.none(), start_value=100.0)
    assert result.tolist() == RETURNS


def test_continuous_leverage_raises_returns_to_factor():
    leverage = 5.0
    result = accumulate(RETURNS, LeveragePolicy.continuous(leverage), start_value=1.0)

    expected = np.cumprod([r**leverage for r in RETURNS])
    assert result.tolist() == pytest.approx(expected.tolist())


def test_initial_leverage_offsets_leveraged_principal():
    result = accumulate(RETURNS, LeveragePolicy.initial(5.0), start_value=10.0)

    product = 1.0
    for ret, value in zip(RETURNS, result):
        product *= ret
        assert value == pytest.approx(50.0 * product - 40.0)


def test_pointwise_leverage_levers_excess_return():
    result = accumulate([1.1, 0.9], LeveragePolicy.pointwise(2.0), start_value=1.0)
    assert result.tolist() == pytest.approx([1.2, 1.2 * 0.8])


def test_pointwise_leverage_floors_at_zero():
    result = accumulate([1.01, 0.4, 1.5], LeveragePolicy.pointwise(3.0), start_value=100.0)
    assert result[0] == pytest.approx(103.0)
    assert result[1] == 0.0
    assert result[2] == 0.0


@pytest.mark.parametrize("factor", [-10.0, -1.0, 0.0, 0.5, 1.0, 3.0, 100.0])
@pytest.mark.parametrize("r", [0.0, 0.01, 0.5, 0.99, 1.0, 1.01, 2.0, 10.0])
def test_pointwise_multiplier_is_never_negative(factor, r):
    assert tick_multiplier(r, LeveragePolicy.pointwise(factor)) >= 0.0


def test_zero_continuous_leverage_is_flat():
    result = accumulate(RETURNS, LeveragePolicy.continuous(0.0), start_value=7.0)
    assert result.tolist() == [7.0] * len(RETURNS)


def test_unit_leverage_matches_compounding():
    compound = accumulate(RETURNS, LeveragePolicy.compound(), start_value=3.0)
    for policy in (LeveragePolicy.continuous(1.0), LeveragePolicy.pointwise(1.0), LeveragePolicy.initial(1.0)):
        assert accumulate(RETURNS, policy, start_value=3.0).tolist() == pytest.approx(compound.tolist())


def test_negative_leverage_is_accepted():
    result = accumulate([1.1], LeveragePolicy.continuous(-1.0), start_value=1.0)
    assert result[0] == pytest.approx(1.0 / 1.1)


@pytest.mark.parametrize(
    "policy",
    [
        LeveragePolicy.none(),
        LeveragePolicy.compound(),
        LeveragePolicy.continuous(2.0),
        LeveragePolicy.pointwise(2.0),
        LeveragePolicy.initial(2.0),
    ],
)
def test_length_is_preserved(policy):
    assert len(accumulate(iter(RETURNS), policy)) == len(RETURNS)
    assert len(accumulate([], policy)) == 0


def test_accumulate_rejects_non_finite_start_value():
    with pytest.raises(ParameterError):
        accumulate(RETURNS, LeveragePolicy.compound(), start_value=math.nan)


def test_policy_requires_factor_only_for_leverage_kinds():
    with pytest.raises(ParameterError):
        LeveragePolicy(LeverageKind.CONTINUOUS)
    with pytest.raises(ParameterError):
        LeveragePolicy(LeverageKind.COMPOUND, 2.0)
    with pytest.raises(ParameterError):
        LeveragePolicy.initial(math.inf)
    assert LeveragePolicy("pointwise", 2).factor == 2.0


def test_from_options_selects_policy():
    assert LeveragePolicy.from_options(False) == LeveragePolicy.none()
    assert LeveragePolicy.from_options(True) == LeveragePolicy.compound()
    assert LeveragePolicy.from_options(True, continuous_leverage=2.0) == LeveragePolicy.continuous(2.0)
    assert LeveragePolicy.from_options(True, pointwise_leverage=-1.5) == LeveragePolicy.pointwise(-1.5)
    assert LeveragePolicy.from_options(True, initial_leverage=3.0) == LeveragePolicy.initial(3.0)


def test_from_options_rejects_multiple_leverage_options():
    with pytest.raises(ParameterError):
        LeveragePolicy.from_options(True, continuous_leverage=2.0, initial_leverage=3.0)


def test_from_options_ignores_leverage_without_accumulate(caplog):
    with caplog.at_level("WARNING", logger="finsim.leverage"):
        policy = LeveragePolicy.from_options(False, pointwise_leverage=2.0)
    assert policy == LeveragePolicy.none()
    assert "accumulation is disabled" in caplog.text


def test_continuous_leverage_scales_with_start_value():
    leverage = 2.5
    result = accumulate(RETURNS, LeveragePolicy.continuous(leverage), start_value=250.0)

    expected = 250.0 * np.cumprod([r**leverage for r in RETURNS])
    assert result.tolist() == pytest.approx(expected.tolist())


def test_continuous_leverage_saturates_instead_of_raising():
    result = accumulate([0.4, 1.0], LeveragePolicy.continuous(-1000.0), start_value=1.0)
    assert result.tolist() == [math.inf, math.inf]

    zero = accumulate([0.0], LeveragePolicy.continuous(-1.0), start_value=2.0)
    assert zero.tolist() == [math.inf]

    assert tick_multiplier(10.0, LeveragePolicy.continuous(1000.0)) == math.inf


@pytest.mark.parametrize("factor", [0.0, -1.0, -3.5])
def test_initial_leverage_identity_holds_for_degenerate_factors(factor):
    start = 20.0
    result = accumulate(RETURNS, LeveragePolicy.initial(factor), start_value=start)

    product = 1.0
    for ret, value in zip(RETURNS, result):
        product *= ret
        assert value == pytest.approx(start * factor * product - start * (factor - 1.0))


def test_initial_leverage_zero_factor_holds_start_value():
    result = accumulate(RETURNS, LeveragePolicy.initial(0.0), start_value=20.0)
    assert result.tolist() == [20.0] * len(RETURNS)


def test_pass_through_ignores_start_value():
    result = accumulate(RETURNS, LeveragePolicy.none(), start_value=math.inf)
    assert result.tolist() == RETURNS


def test_unknown_policy_kind_raises_parameter_error():
    with pytest.raises(ParameterError):
        LeveragePolicy("sideways")
