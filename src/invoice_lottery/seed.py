"""內建中獎號碼

無法取得雲端資料時使用的初始資料(新到舊)。
"""

from .models import WinningNumberSet

SEED_WINNING_SETS: tuple[WinningNumberSet, ...] = (
    WinningNumberSet(
        period="113年 09-10月",
        special_prize="12345678",
        grand_prize="87654321",
        first_prize_group=("11112222", "33334444", "55556666"),
        additional_sixth_prize=("999", "888"),
    ),
    WinningNumberSet(
        period="113年 07-08月",
        special_prize="98765432",
        grand_prize="23456789",
        first_prize_group=("12121212", "34343434", "56565656"),
        additional_sixth_prize=("111", "222"),
    ),
)
