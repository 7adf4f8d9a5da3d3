"""Phase controller, vote/bet ledgers, claim processor and the service facade."""

from predlaunch.engine.service import LaunchService

__all__ = ["LaunchService"]
