"""Off-core aggregation feeding advance_to_predict and settle."""

from predlaunch.aggregation.consensus import balance_settlement, median_mcap, stake_by_breakpoint

__all__ = ["balance_settlement", "median_mcap", "stake_by_breakpoint"]
