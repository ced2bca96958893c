"""對獎模組

8碼發票號碼與一期中獎號碼的比對。無狀態、無I/O。
格式錯誤不拋出例外，以 PrizeTier.INVALID_FORMAT 回傳。
"""

from .models import PrizeResult, PrizeTier, WinningNumberSet, is_digits

# 頭獎組末碼相符位數 -> 獎別
SUFFIX_TIERS: dict[int, PrizeTier] = {
    8: PrizeTier.FIRST,
    7: PrizeTier.SECOND,
    6: PrizeTier.THIRD,
    5: PrizeTier.FOURTH,
    4: PrizeTier.FIFTH,
    3: PrizeTier.SIXTH,
}

_DESCRIPTIONS: dict[PrizeTier, str] = {
    PrizeTier.SPECIAL: "8碼全中！恭喜獲得1,000萬元",
    PrizeTier.GRAND: "8碼全中！恭喜獲得200萬元",
    PrizeTier.FIRST: "8碼全中！恭喜獲得20萬元",
    PrizeTier.SECOND: "末7碼相符！恭喜獲得4萬元",
    PrizeTier.THIRD: "末6碼相符！恭喜獲得1萬元",
    PrizeTier.FOURTH: "末5碼相符！恭喜獲得4,000元",
    PrizeTier.FIFTH: "末4碼相符！恭喜獲得1,000元",
    PrizeTier.SIXTH: "末3碼相符！恭喜獲得200元",
    PrizeTier.NONE: "可惜沒中，再接再厲！",
    PrizeTier.INVALID_FORMAT: "請輸入完整8位數號碼",
}

ADDITIONAL_SIXTH_DESCRIPTION = "增開六獎！末3碼相符，恭喜獲得200元"


def trailing_match_length(number: str, winning: str) -> int:
    """計算末尾連續相符的位數

    從最後1碼開始逐位比較，遇到第一個不同的位置即停止。

    Args:
        number: 發票號碼
        winning: 中獎號碼

    Returns:
        int: 相符位數(0-8)
    """
    count = 0
    for k in range(1, 9):
        if number[-k:] != winning[-k:]:
            break
        count = k
    return count


def _result(tier: PrizeTier, description: str | None = None) -> PrizeResult:
    return PrizeResult(
        is_winner=tier.is_prize,
        tier=tier,
        matched_digit_count=tier.matched_digits,
        description=_DESCRIPTIONS[tier] if description is None else description,
    )


def match(invoice_number: str, winnings: WinningNumberSet) -> PrizeResult:
    """8碼發票號碼對獎

    依特別獎、特獎、頭獎組(末碼)、增開六獎的順序判定，先符合者為準。
    頭獎組依清單順序檢查，第一個有3碼以上相符的號碼即決定獎別，
    不會再比較後面的號碼是否相符更多位數。

    Args:
        invoice_number: 8碼發票號碼
        winnings: 該期中獎號碼

    Returns:
        PrizeResult: 對獎結果
    """
    if not is_digits(invoice_number, 8):
        return _result(PrizeTier.INVALID_FORMAT)

    if invoice_number == winnings.special_prize:
        return _result(PrizeTier.SPECIAL)
    if invoice_number == winnings.grand_prize:
        return _result(PrizeTier.GRAND)

    for first_prize in winnings.first_prize_group:
        tier = SUFFIX_TIERS.get(trailing_match_length(invoice_number, first_prize))
        if tier is not None:
            return _result(tier)

    if invoice_number[-3:] in winnings.additional_sixth_prize:
        return _result(PrizeTier.SIXTH, ADDITIONAL_SIXTH_DESCRIPTION)

    return _result(PrizeTier.NONE)
