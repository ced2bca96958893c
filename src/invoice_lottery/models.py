"""資料模型模組

中獎號碼、對獎結果、中獎紀錄與預存發票的型別定義與驗證。
JSON欄位名稱與雲端資料(lottery-data.json)保持相容。
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def is_digits(value: str, length: int) -> bool:
    """長度正確且僅由ASCII數字組成時回傳True"""
    return len(value) == length and value.isascii() and value.isdigit()


class PrizeTier(str, Enum):
    """獎別"""

    SPECIAL = "special"
    GRAND = "grand"
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FOURTH = "fourth"
    FIFTH = "fifth"
    SIXTH = "sixth"
    NONE = "none"
    INVALID_FORMAT = "invalid_format"

    @property
    def label(self) -> str:
        """顯示用名稱(例: 頭獎 (20萬元))"""
        return PRIZE_LABELS[self]

    @property
    def amount(self) -> str:
        """獎金金額"""
        return PRIZE_AMOUNTS.get(self, "0元")

    @property
    def is_prize(self) -> bool:
        return self not in (PrizeTier.NONE, PrizeTier.INVALID_FORMAT)

    @property
    def matched_digits(self) -> int:
        """此獎別對應的末碼相符位數"""
        return TIER_MATCHED_DIGITS.get(self, 0)


PRIZE_LABELS: dict[PrizeTier, str] = {
    PrizeTier.SPECIAL: "特別獎 (1,000萬元)",
    PrizeTier.GRAND: "特獎 (200萬元)",
    PrizeTier.FIRST: "頭獎 (20萬元)",
    PrizeTier.SECOND: "二獎 (4萬元)",
    PrizeTier.THIRD: "三獎 (1萬元)",
    PrizeTier.FOURTH: "四獎 (4,000元)",
    PrizeTier.FIFTH: "五獎 (1,000元)",
    PrizeTier.SIXTH: "六獎 (200元)",
    PrizeTier.NONE: "沒中獎",
    PrizeTier.INVALID_FORMAT: "格式錯誤",
}

PRIZE_AMOUNTS: dict[PrizeTier, str] = {
    PrizeTier.SPECIAL: "1,000萬元",
    PrizeTier.GRAND: "200萬元",
    PrizeTier.FIRST: "20萬元",
    PrizeTier.SECOND: "4萬元",
    PrizeTier.THIRD: "1萬元",
    PrizeTier.FOURTH: "4,000元",
    PrizeTier.FIFTH: "1,000元",
    PrizeTier.SIXTH: "200元",
}

TIER_MATCHED_DIGITS: dict[PrizeTier, int] = {
    PrizeTier.SPECIAL: 8,
    PrizeTier.GRAND: 8,
    PrizeTier.FIRST: 8,
    PrizeTier.SECOND: 7,
    PrizeTier.THIRD: 6,
    PrizeTier.FOURTH: 5,
    PrizeTier.FIFTH: 4,
    PrizeTier.SIXTH: 3,
}


class WinningNumberSet(BaseModel):
    """一期的中獎號碼

    期別標籤(例: "113年 09-10月")即為識別鍵，期別相同者視為同一期。
    建立後不可變更。
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    period: str = Field(..., description="期別(例: 113年 09-10月)")
    special_prize: str = Field(..., alias="specialPrize", description="特別獎(8碼)")
    grand_prize: str = Field(..., alias="grandPrize", description="特獎(8碼)")
    first_prize_group: tuple[str, ...] = Field(
        default_factory=tuple, alias="firstPrize", description="頭獎號碼(8碼)"
    )
    additional_sixth_prize: tuple[str, ...] = Field(
        default_factory=tuple,
        alias="additionalSixthPrize",
        description="增開六獎(3碼)",
    )

    @field_validator("special_prize", "grand_prize")
    @classmethod
    def _check_full_number(cls, value: str) -> str:
        if not is_digits(value, 8):
            raise ValueError(f"必須為8碼數字: {value!r}")
        return value

    @field_validator("first_prize_group")
    @classmethod
    def _check_first_prize_group(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for number in value:
            if not is_digits(number, 8):
                raise ValueError(f"頭獎號碼必須為8碼數字: {number!r}")
        return value

    @field_validator("additional_sixth_prize")
    @classmethod
    def _check_additional_sixth_prize(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for number in value:
            if not is_digits(number, 3):
                raise ValueError(f"增開六獎必須為3碼數字: {number!r}")
        return value

    def to_dict(self) -> dict:
        """雲端JSON格式的字典(JSON輸出用)

        Returns:
            dict: camelCase鍵名的字典
        """
        data = self.model_dump(by_alias=True)
        data["firstPrize"] = list(data["firstPrize"])
        data["additionalSixthPrize"] = list(data["additionalSixthPrize"])
        return data


class PrizeResult(BaseModel):
    """完整8碼對獎結果"""

    model_config = ConfigDict(frozen=True)

    is_winner: bool
    tier: PrizeTier
    matched_digit_count: int = Field(..., ge=0, le=8)
    description: str = ""

    @model_validator(mode="after")
    def _check_consistency(self) -> "PrizeResult":
        if self.is_winner != self.tier.is_prize:
            raise ValueError(f"is_winner與獎別不一致: {self.tier.value}")
        if self.matched_digit_count != self.tier.matched_digits:
            raise ValueError(
                f"相符位數與獎別不一致: {self.tier.value}/{self.matched_digit_count}"
            )
        return self


class QuickCheckResult(BaseModel):
    """末3碼速查結果

    potential=True 只代表「可能中獎」，仍須以完整8碼核對。
    """

    model_config = ConfigDict(frozen=True)

    potential: bool
    message: str = ""


class ReceiptScanResult(BaseModel):
    """掃描/OCR辨識出的發票號碼"""

    number: str = Field(..., description="8碼發票號碼")
    period: str | None = Field(default=None, description="辨識出的期別(若有)")

    @field_validator("number")
    @classmethod
    def _check_number(cls, value: str) -> str:
        if not is_digits(value, 8):
            raise ValueError(f"發票號碼必須為8碼數字: {value!r}")
        return value


class WinningRecord(BaseModel):
    """中獎紀錄(每次確認中獎一筆)"""

    id: int
    date: str = Field(..., description="紀錄日期(YYYY-MM-DD)")
    period: str = Field(..., description="期別或「合併對獎」")
    number: str
    prize_type: str = Field(..., alias="prizeType")
    amount: str

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class PendingReceipt(BaseModel):
    """尚未開獎的預存發票(末3碼 + 對獎期別)"""

    id: int
    number: str = Field(..., description="末3碼")
    period: str = Field(..., description="對獎期別")
    date_added: str = Field(..., alias="dateAdded")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("number")
    @classmethod
    def _check_number(cls, value: str) -> str:
        if not is_digits(value, 3):
            raise ValueError(f"請輸入3碼數字: {value!r}")
        return value

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class PendingStatus(str, Enum):
    """預存發票的狀態"""

    PENDING = "pending"
    WIN = "win"
    LOST = "lost"


class PendingCheck(BaseModel):
    """預存發票的核對結果"""

    model_config = ConfigDict(frozen=True)

    status: PendingStatus
    message: str
