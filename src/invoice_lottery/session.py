"""對獎流程模組

鍵盤、語音、掃描、影像等輸入轉交給對獎/速查/期別處理，
結果轉交給紀錄與提示(語音、音效、通知)。
可變狀態(已知期別、選擇期別、紀錄等)全部由 InvoiceSession 持有，
已知期別只整批替換。
"""

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Protocol

from .fetcher import FetchError, WinningNumberFetcher
from .models import (
    PendingCheck,
    PendingReceipt,
    PrizeResult,
    QuickCheckResult,
    WinningNumberSet,
    WinningRecord,
    is_digits,
)
from .normalizer import DigitNormalizer, clean_invoice_number, number_from_qr_payload
from .ocr import OcrError, ReceiptReader, scan_receipt
from .pending import evaluate_pending_receipt, find_pending_wins
from .periods import (
    MERGED_PERIOD_LABEL,
    PeriodSelection,
    check_against_selection,
    check_against_selection3,
    current_term,
    next_period_labels,
    resolve_active_sets,
    upsert_period,
)
from .storage import LocalStore

logger = logging.getLogger(__name__)

BACK_KEY = "back"
QUICK_INPUT_LENGTH = 3


class Feedback(Protocol):
    """對獎結果的提示(語音播報、音效、通知)"""

    def announce(self, message: str, positive: bool) -> None: ...

    def alert(self, message: str) -> None: ...


class LoggingFeedback:
    """以日誌輸出提示的 Feedback"""

    def announce(self, message: str, positive: bool) -> None:
        logger.info("[%s] %s", "中獎" if positive else "未中", message)

    def alert(self, message: str) -> None:
        logger.warning(message)


class InvoiceSession:
    """對獎流程"""

    def __init__(
        self,
        known_sets: Sequence[WinningNumberSet],
        store: LocalStore | None = None,
        feedback: Feedback | None = None,
        normalizer: DigitNormalizer | None = None,
        selection: PeriodSelection | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """初始化

        Args:
            known_sets: 已知期別的中獎號碼(新到舊)
            store: 紀錄的儲存位置(省略時不儲存)
            feedback: 結果提示(省略時輸出至日誌)
            normalizer: 語音文字的正規化
            selection: 對獎期別(省略時為最新一期)
            clock: 目前時刻
        """
        self.store = store
        self.feedback = feedback or LoggingFeedback()
        self.normalizer = normalizer or DigitNormalizer()
        self.selection = selection or PeriodSelection.single(0)
        self._clock = clock

        self.quick_input = ""
        self.history: list[WinningRecord] = store.load_history() if store else []
        self.pending_receipts: list[PendingReceipt] = (
            store.load_pending_receipts() if store else []
        )

        self._known_sets: tuple[WinningNumberSet, ...] = ()
        self.future_periods: list[str] = []
        self._alerted_pending_wins = False
        self.replace_known_sets(known_sets)

    # ---- 已知期別 ----

    @property
    def known_sets(self) -> tuple[WinningNumberSet, ...]:
        return self._known_sets

    def replace_known_sets(self, sets: Sequence[WinningNumberSet]) -> None:
        """已知期別整批替換

        重新計算未開獎期別，並重設預存發票的中獎通知。
        """
        self._known_sets = tuple(sets)
        latest = self._known_sets[0].period if self._known_sets else ""
        self.future_periods = next_period_labels(latest)
        self._alerted_pending_wins = False

        index = self.selection.index
        if index is not None and index >= len(self._known_sets):
            self.selection = PeriodSelection.single(0)

        logger.debug("已知期別: %s", [s.period for s in self._known_sets])

    def select_period(self, selection: PeriodSelection) -> None:
        """切換對獎期別

        Raises:
            ValueError: 期別索引超出範圍時
        """
        index = selection.index
        if index is not None and not 0 <= index < len(self._known_sets):
            raise ValueError(f"期別索引超出範圍: {index}")
        self.selection = selection
        self.quick_input = ""

    def _require_active_sets(self) -> None:
        if not resolve_active_sets(self.selection, self._known_sets):
            raise ValueError("沒有可對獎的中獎號碼")

    # ---- 末3碼速查 ----

    def press_key(self, key: str) -> QuickCheckResult | None:
        """數字鍵盤輸入

        已有3碼時輸入數字會重新開始。湊滿3碼時進行速查。

        Args:
            key: "0"-"9" 或 "back"

        Returns:
            QuickCheckResult | None: 湊滿3碼時為速查結果
        """
        if key == BACK_KEY:
            self.quick_input = self.quick_input[:-1]
            return None
        if not is_digits(key, 1):
            raise ValueError(f"無效的按鍵: {key!r}")

        if len(self.quick_input) >= QUICK_INPUT_LENGTH:
            self.quick_input = key
        else:
            self.quick_input += key

        if len(self.quick_input) == QUICK_INPUT_LENGTH:
            return self.quick_check(self.quick_input)
        return None

    def handle_voice_text(self, text: str) -> QuickCheckResult | None:
        """語音辨識結果逐字輸入鍵盤

        Returns:
            QuickCheckResult | None: 最後一次湊滿3碼時的速查結果
        """
        digits = self.normalizer.to_digits(text)
        logger.debug("語音輸入: %r -> %r", text, digits)
        result = None
        for digit in digits:
            outcome = self.press_key(digit)
            if outcome is not None:
                result = outcome
        return result

    def quick_check(self, suffix: str) -> QuickCheckResult:
        """末3碼速查並提示結果"""
        self._require_active_sets()
        result = check_against_selection3(suffix, self.selection, self._known_sets)
        self.feedback.announce("注意中獎" if result.potential else "沒中", result.potential)
        return result

    # ---- 完整8碼對獎 ----

    def check_full(self, number: str) -> PrizeResult:
        """完整8碼對獎

        中獎時加入中獎紀錄。
        """
        self._require_active_sets()
        result = check_against_selection(number, self.selection, self._known_sets)

        if result.is_winner:
            self.feedback.announce(f"恭喜中獎，{result.tier.label}", True)
            self._add_record(result, number)
        else:
            self.feedback.announce("可惜沒中", False)
        return result

    def handle_scan(self, raw: str) -> PrizeResult | None:
        """OCR辨識結果對獎。取不到8碼時為None"""
        number = clean_invoice_number(raw)
        if number is None:
            self.feedback.alert("無法辨識，請重試")
            return None
        return self.check_full(number)

    def handle_image(
        self, reader: ReceiptReader, image: bytes, mime_type: str = "image/jpeg"
    ) -> PrizeResult | None:
        """發票影像辨識後對獎

        Args:
            reader: 影像辨識服務
            image: 影像資料
            mime_type: 影像格式

        Returns:
            PrizeResult | None: 對獎結果。辨識失敗或找不到號碼時為None
        """
        try:
            result = scan_receipt(reader, image, mime_type)
        except OcrError as e:
            logger.error("影像辨識失敗: %s", e)
            self.feedback.alert("掃描失敗，請稍後再試。")
            return None

        if result is None:
            self.feedback.alert("無法辨識發票號碼，請確認圖片清晰度。")
            return None

        logger.debug("影像辨識結果: %s (%s)", result.number, result.period)
        return self.check_full(result.number)

    def handle_qr_payload(self, payload: str) -> PrizeResult | None:
        """QR Code內容對獎。不是8碼時為None"""
        number = number_from_qr_payload(payload)
        if number is None:
            return None
        return self.check_full(number)

    # ---- 中獎紀錄 ----

    def _next_id(self, used: Sequence[int]) -> int:
        new_id = int(self._clock().timestamp() * 1000)
        if used and new_id <= max(used):
            new_id = max(used) + 1
        return new_id

    def _add_record(self, result: PrizeResult, number: str) -> WinningRecord:
        if self.selection.is_merged:
            period = MERGED_PERIOD_LABEL
        else:
            period = self._known_sets[self.selection.index].period

        record = WinningRecord(
            id=self._next_id([r.id for r in self.history]),
            date=self._clock().date().isoformat(),
            period=period,
            number=number,
            prize_type=result.tier.label,
            amount=result.tier.amount,
        )
        self.history = [record, *self.history]
        if self.store is not None:
            self.store.save_history(self.history)
        logger.info("中獎紀錄: %s %s %s", record.period, number, record.prize_type)
        return record

    def clear_history(self) -> None:
        self.history = []
        if self.store is not None:
            self.store.clear_history()

    # ---- 預存發票 ----

    def add_pending_receipt(self, number: str, period: str | None = None) -> PendingReceipt:
        """預存發票

        Args:
            number: 末3碼
            period: 對獎期別(省略時為下一期)

        Raises:
            ValueError: 不是3碼數字時
        """
        if not is_digits(number, 3):
            raise ValueError("請輸入3碼數字")

        receipt = PendingReceipt(
            id=self._next_id([r.id for r in self.pending_receipts]),
            number=number,
            period=period or self.future_periods[0],
            date_added=self._clock().date().isoformat(),
        )
        self.pending_receipts = [receipt, *self.pending_receipts]
        self._save_pending()
        logger.info("預存發票: %s (%s)", receipt.number, receipt.period)
        self.check_pending_wins()
        return receipt

    def delete_pending_receipt(self, receipt_id: int) -> None:
        self.pending_receipts = [r for r in self.pending_receipts if r.id != receipt_id]
        self._save_pending()

    def _save_pending(self) -> None:
        if self.store is not None:
            self.store.save_pending_receipts(self.pending_receipts)

    def pending_status(self, receipt: PendingReceipt) -> PendingCheck:
        return evaluate_pending_receipt(receipt, self._known_sets)

    def check_pending_wins(self) -> list[PendingReceipt]:
        """預存發票中疑似中獎者

        每次更新中獎號碼後只通知一次。

        Returns:
            list[PendingReceipt]: 本次通知的預存發票(已通知過時為空)
        """
        if self._alerted_pending_wins or not self._known_sets:
            return []

        winners = find_pending_wins(self.pending_receipts, self._known_sets)
        if winners:
            self._alerted_pending_wins = True
            numbers = ", ".join(r.number for r in winners)
            self.feedback.alert(
                f"注意！您的預存發票中有疑似中獎號碼：{numbers}，請前往「紀錄」頁面核對！"
            )
        return winners

    # ---- 中獎號碼更新 ----

    def set_winning_numbers(self, winnings: WinningNumberSet) -> None:
        """手動輸入一期中獎號碼

        已有同期別時替換，否則成為最新一期。與更新相同，整批替換並儲存。
        """
        self._apply_refresh(upsert_period(self._known_sets, winnings))
        logger.info("已手動設定中獎號碼: %s", winnings.period)

    def refresh(self, fetcher: WinningNumberFetcher, today: date | None = None) -> bool:
        """中獎號碼更新

        先從雲端取得全部期別；失敗且有設定AppID時，從API取得當期並合併。

        Returns:
            bool: 有更新時為True
        """
        try:
            sets = fetcher.fetch_from_cloud()
        except FetchError as e:
            logger.warning("雲端更新失敗: %s", e)
        else:
            self._apply_refresh(sets)
            logger.info("已從雲端同步最新號碼")
            return True

        if fetcher.settings.invoice_app_id is None:
            logger.info("已檢查雲端更新 (無新資料)")
            return False

        term, _label = current_term(today or self._clock().date())
        try:
            fresh = fetcher.fetch_from_api(term)
        except FetchError as e:
            logger.warning("API更新失敗: %s", e)
            return False

        self._apply_refresh(upsert_period(self._known_sets, fresh))
        logger.info("已透過API更新當期資料: %s", fresh.period)
        return True

    def _apply_refresh(self, sets: Sequence[WinningNumberSet]) -> None:
        self.replace_known_sets(sets)
        if self.store is not None:
            self.store.save_winning_sets(self._known_sets)
