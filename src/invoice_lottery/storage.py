"""本機儲存模組

中獎紀錄、預存發票、已知期別的中獎號碼以JSON檔儲存。
"""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

from .models import PendingReceipt, WinningNumberSet, WinningRecord

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "winning_history.json"
PENDING_FILENAME = "pending_receipts.json"
WINNING_SETS_FILENAME = "lottery-data.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


def save_models_to_json(items: Sequence[BaseModel], output_path: Path) -> Path:
    """模型清單存為JSON檔

    Args:
        items: 要儲存的資料(需有 to_dict())
        output_path: 輸出檔路徑(目錄不存在時自動建立)

    Returns:
        Path: 儲存的檔案路徑
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = [item.to_dict() for item in items]

    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    logger.debug("已儲存: %s (%d筆)", output_path, len(data))
    return output_path


def load_models_from_json(file_path: Path, model: type[ModelT]) -> list[ModelT]:
    """JSON檔讀取模型清單

    Args:
        file_path: JSON檔路徑
        model: 模型類別

    Returns:
        list: 讀取的資料

    Raises:
        FileNotFoundError: 檔案不存在時
    """
    with file_path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    items = [model.model_validate(item) for item in data]
    logger.debug("已讀取: %s (%d筆)", file_path, len(items))
    return items


class LocalStore:
    """資料目錄下的兩組紀錄(中獎紀錄、預存發票)與中獎號碼快取"""

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir

    @property
    def history_path(self) -> Path:
        return self.data_dir / HISTORY_FILENAME

    @property
    def pending_path(self) -> Path:
        return self.data_dir / PENDING_FILENAME

    @property
    def winning_sets_path(self) -> Path:
        return self.data_dir / WINNING_SETS_FILENAME

    def _load(self, path: Path, model: type[ModelT]) -> list[ModelT]:
        if not path.exists():
            return []
        return load_models_from_json(path, model)

    def load_history(self) -> list[WinningRecord]:
        return self._load(self.history_path, WinningRecord)

    def save_history(self, records: Sequence[WinningRecord]) -> Path:
        return save_models_to_json(records, self.history_path)

    def clear_history(self) -> None:
        """刪除中獎紀錄檔"""
        self.history_path.unlink(missing_ok=True)
        logger.info("已清除中獎紀錄")

    def load_pending_receipts(self) -> list[PendingReceipt]:
        return self._load(self.pending_path, PendingReceipt)

    def save_pending_receipts(self, receipts: Sequence[PendingReceipt]) -> Path:
        return save_models_to_json(receipts, self.pending_path)

    def load_winning_sets(self) -> list[WinningNumberSet]:
        """快取的中獎號碼(新到舊)。沒有快取時為空清單"""
        return self._load(self.winning_sets_path, WinningNumberSet)

    def save_winning_sets(self, sets: Sequence[WinningNumberSet]) -> Path:
        path = save_models_to_json(sets, self.winning_sets_path)
        logger.info("中獎號碼已儲存: %s (%d期)", path, len(sets))
        return path
