"""Utility modules for arkwallet."""

from arkwallet.utils.amounts import format_sats, is_blank, parse_amount
from arkwallet.utils.sequencing import OperationSequencer

__all__ = ["OperationSequencer", "format_sats", "is_blank", "parse_amount"]
