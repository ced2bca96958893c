"""models.py的測試"""

import json

import pytest
from pydantic import ValidationError

from invoice_lottery.models import (
    PendingReceipt,
    PrizeResult,
    PrizeTier,
    ReceiptScanResult,
    WinningNumberSet,
    WinningRecord,
)


class TestWinningNumberSet:
    """WinningNumberSet模型的測試"""

    def test_create_from_cloud_json(self):
        """雲端JSON的鍵名可建立"""
        winnings = WinningNumberSet.model_validate(
            {
                "period": "113年 09-10月",
                "specialPrize": "12345678",
                "grandPrize": "87654321",
                "firstPrize": ["11112222", "33334444"],
                "additionalSixthPrize": ["999"],
            }
        )

        assert winnings.period == "113年 09-10月"
        assert winnings.special_prize == "12345678"
        assert winnings.first_prize_group == ("11112222", "33334444")
        assert winnings.additional_sixth_prize == ("999",)

    def test_empty_groups_are_valid(self):
        """頭獎組、增開六獎可為空"""
        winnings = WinningNumberSet(
            period="113年 09-10月", special_prize="12345678", grand_prize="87654321"
        )

        assert winnings.first_prize_group == ()
        assert winnings.additional_sixth_prize == ()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"special_prize": "1234567"},
            {"grand_prize": "8765432a"},
            {"first_prize_group": ("1111222",)},
            {"additional_sixth_prize": ("9999",)},
            {"additional_sixth_prize": ("９９９",)},
        ],
    )
    def test_invalid_numbers_raise_error(self, overrides):
        """號碼位數不正確時為錯誤"""
        fields = {
            "period": "113年 09-10月",
            "special_prize": "12345678",
            "grand_prize": "87654321",
            **overrides,
        }
        with pytest.raises(ValidationError):
            WinningNumberSet(**fields)

    def test_is_immutable(self, latest_set: WinningNumberSet):
        """建立後不可修改"""
        with pytest.raises(ValidationError):
            latest_set.special_prize = "00000000"

    def test_to_dict_json_compatible(self, latest_set: WinningNumberSet):
        """to_dict()為雲端JSON相同格式"""
        result = latest_set.to_dict()
        restored = json.loads(json.dumps(result, ensure_ascii=False))

        assert restored["specialPrize"] == "12345678"
        assert restored["firstPrize"] == ["11112222", "33334444", "55556666"]
        assert WinningNumberSet.model_validate(restored) == latest_set


class TestPrizeTier:
    """PrizeTier的測試"""

    @pytest.mark.parametrize(
        ("tier", "amount"),
        [
            (PrizeTier.SPECIAL, "1,000萬元"),
            (PrizeTier.GRAND, "200萬元"),
            (PrizeTier.FIRST, "20萬元"),
            (PrizeTier.SIXTH, "200元"),
            (PrizeTier.NONE, "0元"),
            (PrizeTier.INVALID_FORMAT, "0元"),
        ],
    )
    def test_amount(self, tier, amount):
        assert tier.amount == amount

    def test_label(self):
        assert PrizeTier.SECOND.label == "二獎 (4萬元)"
        assert PrizeTier.NONE.label == "沒中獎"


class TestPrizeResult:
    """PrizeResult模型的測試"""

    def test_consistent_result(self):
        result = PrizeResult(
            is_winner=True, tier=PrizeTier.THIRD, matched_digit_count=6
        )

        assert result.matched_digit_count == 6

    def test_winner_flag_must_match_tier(self):
        """is_winner與獎別不一致時為錯誤"""
        with pytest.raises(ValidationError):
            PrizeResult(is_winner=True, tier=PrizeTier.NONE, matched_digit_count=0)

    def test_digit_count_must_match_tier(self):
        """相符位數與獎別不一致時為錯誤"""
        with pytest.raises(ValidationError):
            PrizeResult(is_winner=True, tier=PrizeTier.FIFTH, matched_digit_count=5)


class TestRecords:
    """紀錄模型的測試"""

    def test_pending_receipt_requires_three_digits(self):
        with pytest.raises(ValidationError):
            PendingReceipt(id=1, number="12", period="113年 11-12月", date_added="2024-10-01")

    def test_pending_receipt_to_dict(self):
        receipt = PendingReceipt(
            id=1, number="123", period="113年 11-12月", date_added="2024-10-01"
        )

        assert receipt.to_dict() == {
            "id": 1,
            "number": "123",
            "period": "113年 11-12月",
            "dateAdded": "2024-10-01",
        }

    def test_winning_record_from_dict(self):
        record = WinningRecord.model_validate(
            {
                "id": 1,
                "date": "2024-10-01",
                "period": "合併對獎",
                "number": "12345678",
                "prizeType": "特別獎 (1,000萬元)",
                "amount": "1,000萬元",
            }
        )

        assert record.prize_type == "特別獎 (1,000萬元)"
        assert record.to_dict()["prizeType"] == "特別獎 (1,000萬元)"

    def test_receipt_scan_result(self):
        assert ReceiptScanResult(number="12345678").period is None
        with pytest.raises(ValidationError):
            ReceiptScanResult(number="1234")
