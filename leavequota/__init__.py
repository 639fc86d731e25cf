"""Leave Quota — working days, period usage, allocations and balances for academy staff leave."""

__version__ = "1.0.0"
