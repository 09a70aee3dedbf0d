from .ledger import BacktestResult, EquityPoint, OpenPosition, Position, Transaction

__all__ = ["BacktestResult", "EquityPoint", "OpenPosition", "Position", "Transaction"]
