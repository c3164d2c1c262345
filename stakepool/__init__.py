"""Stake Pool: time-locked staking with pro-rata yield distribution."""

__version__ = "0.1.0"
