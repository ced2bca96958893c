"""發票影像辨識模組

影像辨識本身交由外部服務處理，這裡只定義介面與結果整理。
外部服務回傳的結構: {"invoiceNumber": "...", "period": "113年01-02月" | None}
"""

import logging
from typing import Any, Protocol

from .models import ReceiptScanResult
from .normalizer import clean_invoice_number

logger = logging.getLogger(__name__)


class OcrError(Exception):
    """影像辨識失敗時的例外"""

    pass


class ReceiptReader(Protocol):
    """發票影像辨識服務"""

    def read(self, image: bytes, mime_type: str = "image/jpeg") -> dict[str, Any] | None:
        """影像辨識

        Raises:
            OcrError: 服務呼叫失敗時
        """
        ...


def scan_receipt(
    reader: ReceiptReader, image: bytes, mime_type: str = "image/jpeg"
) -> ReceiptScanResult | None:
    """發票影像取出8碼號碼與期別

    Args:
        reader: 影像辨識服務
        image: 影像資料
        mime_type: 影像格式

    Returns:
        ReceiptScanResult | None: 辨識結果。找不到8碼號碼時為None

    Raises:
        OcrError: 服務呼叫失敗時
    """
    data = reader.read(image, mime_type)
    if not data:
        logger.info("影像中找不到發票號碼")
        return None

    number = clean_invoice_number(str(data.get("invoiceNumber") or ""))
    if number is None:
        logger.info("辨識結果不是8碼號碼: %s", data.get("invoiceNumber"))
        return None

    return ReceiptScanResult(number=number, period=data.get("period") or None)
