"""Background workers for the invoicing service"""
from .idempotency_sweeper import IdempotencySweeperWorker, SweepResult

__all__ = ["IdempotencySweeperWorker", "SweepResult"]
