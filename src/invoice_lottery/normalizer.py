"""輸入正規化模組

語音辨識文字、OCR結果、QR Code內容轉為數字字串。
"""

import re
from pathlib import Path

import yaml

DEFAULT_MAPPING_FILE = Path(__file__).parent / "data" / "digit_mapping.yaml"

_NON_DIGIT = re.compile(r"[^0-9]")


class DigitNormalizer:
    """語音辨識文字轉數字的正規化類別"""

    def __init__(self, extra_mapping_file: Path | None = None):
        """初始化

        Args:
            extra_mapping_file: 追加的對應檔(YAML)，與內建對應合併
        """
        self.mapping: dict[str, str] = self._load_mapping(DEFAULT_MAPPING_FILE)
        if extra_mapping_file is not None and extra_mapping_file.exists():
            self.mapping.update(self._load_mapping(extra_mapping_file))

    @staticmethod
    def _load_mapping(path: Path) -> dict[str, str]:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return {str(k): str(v) for k, v in data.items()}

    def to_digits(self, text: str) -> str:
        """文字轉為數字字串

        Args:
            text: 語音辨識結果(例: "三五七")

        Returns:
            str: 數字字串。無法對應的字元忽略

        Examples:
            >>> DigitNormalizer().to_digits("三五七")
            '357'
            >>> DigitNormalizer().to_digits("號碼 1２三")
            '123'
        """
        result = []
        for char in text:
            if char in self.mapping:
                result.append(self.mapping[char])
            elif char.isascii() and char.isdigit():
                result.append(char)
        return "".join(result)


def clean_invoice_number(raw: str) -> str | None:
    """OCR結果取出8碼發票號碼

    去除非數字字元，多於8碼時取最後8碼。

    Returns:
        str | None: 8碼號碼。不足8碼時為None
    """
    digits = _NON_DIGIT.sub("", raw)
    if len(digits) < 8:
        return None
    return digits[-8:]


def number_from_qr_payload(payload: str) -> str | None:
    """QR Code內容取出8碼發票號碼(去除非數字後恰為8碼時)"""
    digits = _NON_DIGIT.sub("", payload)
    return digits if len(digits) == 8 else None
