"""pending.py的測試"""

from invoice_lottery.models import PendingReceipt, PendingStatus
from invoice_lottery.pending import evaluate_pending_receipt, find_pending_wins


def _receipt(receipt_id: int, number: str, period: str) -> PendingReceipt:
    return PendingReceipt(
        id=receipt_id, number=number, period=period, date_added="2024-10-01"
    )


class TestEvaluatePendingReceipt:
    """evaluate_pending_receipt函式的測試"""

    def test_pending_until_drawn(self, known_sets):
        """該期尚未公布時為等待開獎"""
        check = evaluate_pending_receipt(_receipt(1, "111", "113年 11-12月"), known_sets)

        assert check.status is PendingStatus.PENDING
        assert check.message == "等待開獎"

    def test_win(self, known_sets):
        """該期速查可能中獎時為疑似中獎"""
        check = evaluate_pending_receipt(_receipt(1, "111", "113年 07-08月"), known_sets)

        assert check.status is PendingStatus.WIN

    def test_lost(self, known_sets):
        """只對照該期的號碼"""
        check = evaluate_pending_receipt(_receipt(1, "111", "113年 09-10月"), known_sets)

        assert check.status is PendingStatus.LOST
        assert check.message == "未中獎"


def test_find_pending_wins(known_sets):
    receipts = [
        _receipt(1, "111", "113年 07-08月"),
        _receipt(2, "123", "113年 07-08月"),
        _receipt(3, "999", "113年 09-10月"),
        _receipt(4, "999", "113年 11-12月"),
    ]

    winners = find_pending_wins(receipts, known_sets)

    assert [r.id for r in winners] == [1, 3]
