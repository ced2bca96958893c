"""預存發票模組

尚未開獎的發票(末3碼 + 期別)，在該期中獎號碼公布後以末3碼速查判定。
"""

from collections.abc import Sequence

from .models import PendingCheck, PendingReceipt, PendingStatus, WinningNumberSet
from .periods import find_set_by_period
from .quick_check import quick_check


def evaluate_pending_receipt(
    receipt: PendingReceipt, known_sets: Sequence[WinningNumberSet]
) -> PendingCheck:
    """預存發票目前的狀態

    Args:
        receipt: 預存發票
        known_sets: 已知期別

    Returns:
        PendingCheck: 尚未開獎 / 疑似中獎 / 未中獎
    """
    winnings = find_set_by_period(known_sets, receipt.period)
    if winnings is None:
        return PendingCheck(status=PendingStatus.PENDING, message="等待開獎")
    if quick_check(receipt.number, winnings).potential:
        return PendingCheck(status=PendingStatus.WIN, message="注意！疑似中獎")
    return PendingCheck(status=PendingStatus.LOST, message="未中獎")


def find_pending_wins(
    receipts: Sequence[PendingReceipt], known_sets: Sequence[WinningNumberSet]
) -> list[PendingReceipt]:
    """疑似中獎的預存發票"""
    return [
        receipt
        for receipt in receipts
        if evaluate_pending_receipt(receipt, known_sets).status is PendingStatus.WIN
    ]
