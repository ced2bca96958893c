"""共用fixture"""

from datetime import datetime
from pathlib import Path

import pytest

from invoice_lottery.models import WinningNumberSet
from invoice_lottery.session import InvoiceSession
from invoice_lottery.storage import LocalStore


class RecordingFeedback:
    """提示內容記錄用的 Feedback"""

    def __init__(self):
        self.announcements: list[tuple[str, bool]] = []
        self.alerts: list[str] = []

    def announce(self, message: str, positive: bool) -> None:
        self.announcements.append((message, positive))

    def alert(self, message: str) -> None:
        self.alerts.append(message)


@pytest.fixture
def latest_set() -> WinningNumberSet:
    """最新一期"""
    return WinningNumberSet(
        period="113年 09-10月",
        special_prize="12345678",
        grand_prize="87654321",
        first_prize_group=("11112222", "33334444", "55556666"),
        additional_sixth_prize=("999", "888"),
    )


@pytest.fixture
def previous_set() -> WinningNumberSet:
    """上一期"""
    return WinningNumberSet(
        period="113年 07-08月",
        special_prize="98765432",
        grand_prize="23456789",
        first_prize_group=("12121212", "34343434", "56565656"),
        additional_sixth_prize=("111", "222"),
    )


@pytest.fixture
def known_sets(
    latest_set: WinningNumberSet, previous_set: WinningNumberSet
) -> list[WinningNumberSet]:
    return [latest_set, previous_set]


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "data")


@pytest.fixture
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 10, 1, 12, 0, 0)


@pytest.fixture
def session(
    known_sets: list[WinningNumberSet],
    store: LocalStore,
    feedback: RecordingFeedback,
    fixed_now: datetime,
) -> InvoiceSession:
    return InvoiceSession(
        known_sets,
        store=store,
        feedback=feedback,
        clock=lambda: fixed_now,
    )
