"""Order settlement and wallet crediting."""

from .service import LedgerService, SettlementOutcome
from .split import compute_settlement

__all__ = ["LedgerService", "SettlementOutcome", "compute_settlement"]
