"""期別處理模組

對獎期別的選擇(單一期 / 兩期合併)、期別標籤的解析與推算。
期別標籤格式: "<民國年>年 <起月>-<迄月>月"(月份補零至2位數)
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from .matcher import match
from .models import PrizeResult, QuickCheckResult, WinningNumberSet
from .quick_check import quick_check

PLACEHOLDER_LABELS: tuple[str, str] = ("下期待定", "下下期待定")
MERGED_PERIOD_LABEL = "合併對獎"
MSG_MERGED_POTENTIAL = "注意中獎 (請核對期別)"
MSG_MERGED_NO_WIN = "沒中"

_YEAR_PATTERN = re.compile(r"(\d+)年")
_MONTH_PATTERN = re.compile(r"(\d+)-(\d+)月")

# 民國紀元
ROC_YEAR_OFFSET = 1911


@dataclass(frozen=True)
class PeriodSelection:
    """對獎期別的選擇

    index 為 None 時表示「所有已知期別合併對獎」。
    """

    index: int | None = None

    @classmethod
    def single(cls, index: int) -> "PeriodSelection":
        return cls(index=index)

    @classmethod
    def merged(cls) -> "PeriodSelection":
        return cls(index=None)

    @property
    def is_merged(self) -> bool:
        return self.index is None


MERGE_ALL = PeriodSelection.merged()


def format_period_label(year: int, end_month: int) -> str:
    """民國年與迄月組成期別標籤

    Args:
        year: 民國年
        end_month: 迄月(偶數月)

    Returns:
        str: 期別標籤(例: 113年 09-10月)
    """
    return f"{year}年 {end_month - 1:02d}-{end_month:02d}月"


def resolve_active_sets(
    selection: PeriodSelection, known_sets: Sequence[WinningNumberSet]
) -> list[WinningNumberSet]:
    """取得本次對獎要使用的中獎號碼

    Args:
        selection: 期別選擇
        known_sets: 已知期別(新到舊)

    Returns:
        list[WinningNumberSet]: 單一期時為該期一筆(索引超出範圍時為空)，
            合併時為全部已知期別
    """
    if selection.is_merged:
        return list(known_sets)
    if 0 <= selection.index < len(known_sets):
        return [known_sets[selection.index]]
    return []


def check_against_selection(
    number: str,
    selection: PeriodSelection,
    known_sets: Sequence[WinningNumberSet],
) -> PrizeResult:
    """依期別選擇進行8碼對獎

    合併對獎時回傳第一個中獎期別的結果；都沒中時回傳第一期的結果。

    Raises:
        IndexError: 對獎期別不存在時(呼叫端須事先確認)
    """
    active = resolve_active_sets(selection, known_sets)
    if not active:
        raise IndexError(f"對獎期別不存在: {selection}")

    results = [match(number, winnings) for winnings in active]
    if selection.is_merged:
        return next((r for r in results if r.is_winner), results[0])
    return results[0]


def check_against_selection3(
    suffix: str,
    selection: PeriodSelection,
    known_sets: Sequence[WinningNumberSet],
) -> QuickCheckResult:
    """依期別選擇進行末3碼速查

    Raises:
        IndexError: 對獎期別不存在時(呼叫端須事先確認)
    """
    active = resolve_active_sets(selection, known_sets)
    if not selection.is_merged:
        if not active:
            raise IndexError(f"對獎期別不存在: {selection}")
        return quick_check(suffix, active[0])

    if any(quick_check(suffix, winnings).potential for winnings in active):
        return QuickCheckResult(potential=True, message=MSG_MERGED_POTENTIAL)
    return QuickCheckResult(potential=False, message=MSG_MERGED_NO_WIN)


def next_period_labels(latest_period: str, count: int = 2) -> list[str]:
    """最新期別之後尚未開獎的期別標籤

    Args:
        latest_period: 最新期別標籤(例: 113年 09-10月)
        count: 產生數量

    Returns:
        list[str]: 期別標籤。無法解析或迄月不是偶數月時回傳固定的兩個暫定標籤
    """
    year_match = _YEAR_PATTERN.search(latest_period)
    month_match = _MONTH_PATTERN.search(latest_period)
    if year_match is None or month_match is None:
        return list(PLACEHOLDER_LABELS)

    year = int(year_match.group(1))
    end_month = int(month_match.group(2))
    if not 2 <= end_month <= 12 or end_month % 2 != 0:
        return list(PLACEHOLDER_LABELS)

    labels = []
    for _ in range(count):
        end_month += 2
        if end_month > 12:
            end_month -= 12
            year += 1
        labels.append(format_period_label(year, end_month))
    return labels


def period_label_from_term(term: str) -> str:
    """財政部API的期別代碼轉為期別標籤

    Examples:
        >>> period_label_from_term("11310")
        '113年 09-10月'
    """
    return format_period_label(int(term[:3]), int(term[3:]))


def current_term(today: date) -> tuple[str, str]:
    """指定日期時最近一次已開獎的期別

    單數月25日開出前兩個月的獎號，因此以「上個月、捨去至偶數月」為迄月。

    Args:
        today: 基準日

    Returns:
        tuple[str, str]: (API期別代碼, 期別標籤)。例: ("11310", "113年 09-10月")
    """
    year = today.year - ROC_YEAR_OFFSET
    end_month = today.month - 1
    if end_month % 2 != 0:
        end_month -= 1
    if end_month == 0:
        end_month = 12
        year -= 1
    return f"{year}{end_month:02d}", format_period_label(year, end_month)


def find_set_by_period(
    known_sets: Sequence[WinningNumberSet], period: str
) -> WinningNumberSet | None:
    """以期別標籤尋找中獎號碼"""
    return next((s for s in known_sets if s.period == period), None)


def upsert_period(
    known_sets: Sequence[WinningNumberSet], fresh: WinningNumberSet
) -> list[WinningNumberSet]:
    """以期別為鍵更新或新增一期

    已有同期別時原位置替換，否則加在最前面。不修改傳入的序列。

    Returns:
        list[WinningNumberSet]: 新的期別清單
    """
    updated = list(known_sets)
    for i, winnings in enumerate(updated):
        if winnings.period == fresh.period:
            updated[i] = fresh
            return updated
    return [fresh, *updated]
