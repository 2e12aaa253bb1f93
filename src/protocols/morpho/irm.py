"""AdaptiveCurveIRM calculations for Morpho Blue."""

from decimal import Decimal

from src.protocols.morpho.config import (
    CURVE_STEEPNESS,
    INITIAL_RATE_AT_TARGET,
    MAX_RATE_AT_TARGET,
    MIN_RATE_AT_TARGET,
    TARGET_UTILIZATION,
)


class AdaptiveCurveIRM:
    """
    AdaptiveCurveIRM rate curve for Morpho Blue.

    The curve is piecewise linear around the target utilization (90%):
    at 0% utilization the borrow rate is rateAtTarget / steepness, at target
    it is rateAtTarget and at 100% it is rateAtTarget * steepness.

    Only the instantaneous curve is modelled. The slow drift of rateAtTarget
    over time is irrelevant for "what if I supply X now" questions.

    Reference: https://docs.morpho.org/morpho/concepts/irm
    """

    def __init__(
        self,
        target_utilization: Decimal = TARGET_UTILIZATION,
        curve_steepness: Decimal = CURVE_STEEPNESS,
    ):
        if not Decimal("0") < target_utilization < Decimal("1"):
            raise ValueError(f"Target utilization must be in (0, 1), got {target_utilization}")
        if curve_steepness < Decimal("1"):
            raise ValueError(f"Curve steepness must be >= 1, got {curve_steepness}")
        self.target_utilization = target_utilization
        self.curve_steepness = curve_steepness

    def calculate_borrow_rate(
        self,
        utilization: Decimal,
        rate_at_target: Decimal,
    ) -> Decimal:
        """
        Calculate the borrow rate (APR) for a given utilization.

        err = (u - target) / target            when u <= target
        err = (u - target) / (1 - target)      when u > target
        rate = rateAtTarget * (coeff * err + 1)
        with coeff = 1 - 1/steepness below target, steepness - 1 above.

        Args:
            utilization: Current utilization (0-1, clamped)
            rate_at_target: Current rate at target utilization (a market that
                has never accrued reports 0 and uses the initial rate)

        Returns:
            Borrow rate (APR)
        """
        utilization = min(max(utilization, Decimal("0")), Decimal("1"))
        rate_at_target = self.bounded_rate_at_target(rate_at_target)

        if utilization <= self.target_utilization:
            err = (utilization - self.target_utilization) / self.target_utilization
            coeff = Decimal("1") - Decimal("1") / self.curve_steepness
        else:
            err = (utilization - self.target_utilization) / (Decimal("1") - self.target_utilization)
            coeff = self.curve_steepness - Decimal("1")

        return rate_at_target * (coeff * err + Decimal("1"))

    @staticmethod
    def bounded_rate_at_target(rate_at_target: Decimal) -> Decimal:
        """Clamp rateAtTarget to the contract bounds; 0 means not yet initialized."""
        if rate_at_target <= Decimal("0"):
            return INITIAL_RATE_AT_TARGET
        return min(max(rate_at_target, MIN_RATE_AT_TARGET), MAX_RATE_AT_TARGET)

    def calculate_supply_rate(
        self,
        utilization: Decimal,
        borrow_rate: Decimal,
        fee: Decimal = Decimal("0"),
    ) -> Decimal:
        """
        Calculate supply rate from borrow rate and utilization.

        supply_rate = borrow_rate * utilization * (1 - fee)
        """
        return borrow_rate * utilization * (Decimal("1") - fee)

    @staticmethod
    def apr_to_apy(apr: Decimal) -> Decimal:
        """
        Convert a continuously compounded APR to APY.

        APY = e^APR - 1
        """
        if apr <= Decimal("0"):
            return Decimal("0")
        return apr.exp() - Decimal("1")

    @staticmethod
    def apy_to_apr(apy: Decimal) -> Decimal:
        """
        Convert APY back to a continuously compounded APR.

        APR = ln(1 + APY)
        """
        if apy <= Decimal("0"):
            return Decimal("0")
        return (Decimal("1") + apy).ln()
