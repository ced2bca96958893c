"""末3碼速查模組

只有末3碼時無法確定是否中獎，因此採寬鬆判定：
只要可能中獎就回報 potential=True，最終以完整8碼對獎為準。
"""

from .models import QuickCheckResult, WinningNumberSet, is_digits

MSG_ADDITIONAL_SIXTH = "中獎！符合增開六獎 (200元)"
MSG_FIRST_PRIZE = "有機會！末3碼符合頭獎組，請核對完整號碼"
MSG_SPECIAL_PRIZE = "有機會！末3碼符合特別獎，請核對完整號碼"
MSG_GRAND_PRIZE = "有機會！末3碼符合特獎，請核對完整號碼"
MSG_NO_WIN = "沒中"


def quick_check(suffix: str, winnings: WinningNumberSet) -> QuickCheckResult:
    """末3碼速查

    Args:
        suffix: 3碼數字
        winnings: 該期中獎號碼

    Returns:
        QuickCheckResult: 速查結果。格式錯誤時 potential=False、message為空字串
    """
    if not is_digits(suffix, 3):
        return QuickCheckResult(potential=False, message="")

    if suffix in winnings.additional_sixth_prize:
        return QuickCheckResult(potential=True, message=MSG_ADDITIONAL_SIXTH)

    if any(number.endswith(suffix) for number in winnings.first_prize_group):
        return QuickCheckResult(potential=True, message=MSG_FIRST_PRIZE)

    # 特別獎、特獎須8碼全中，但末3碼相同時仍提醒核對
    if winnings.special_prize.endswith(suffix):
        return QuickCheckResult(potential=True, message=MSG_SPECIAL_PRIZE)
    if winnings.grand_prize.endswith(suffix):
        return QuickCheckResult(potential=True, message=MSG_GRAND_PRIZE)

    return QuickCheckResult(potential=False, message=MSG_NO_WIN)
