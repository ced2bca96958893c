"""中獎號碼取得模組

雲端JSON(預先產生的 lottery-data.json)與財政部電子發票API兩種來源。
"""

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Settings
from .models import WinningNumberSet
from .periods import period_label_from_term

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """中獎號碼取得失敗時的例外"""

    pass


class WinningNumberFetcher:
    """中獎號碼的取得類別"""

    def __init__(self, settings: Settings, client: httpx.Client | None = None):
        """初始化

        Args:
            settings: 應用程式設定
            client: HTTP客戶端(省略時依設定建立)
        """
        self.settings = settings
        self.client = client or httpx.Client(
            timeout=settings.timeout,
            headers={"User-Agent": "tw-invoice-lottery"},
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "WinningNumberFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get_json(self, url: str, params: dict[str, str]) -> Any:
        """附重試的JSON取得

        Raises:
            FetchError: 通訊失敗、HTTP錯誤、JSON解析失敗時
        """

        @retry(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.settings.max_retries),
            wait=wait_exponential(
                multiplier=1,
                min=self.settings.retry_min_wait,
                max=self.settings.retry_max_wait,
            ),
            before_sleep=lambda retry_state: logger.warning(
                "重試 %d/%d: %s",
                retry_state.attempt_number,
                self.settings.max_retries,
                url,
            ),
            reraise=True,
        )
        def _get() -> httpx.Response:
            return self.client.get(
                url, params=params, headers={"Accept": "application/json"}
            )

        try:
            response = _get()
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP錯誤 {e.response.status_code}: {url}") from e
        except httpx.TransportError as e:
            raise FetchError(f"連線失敗: {url}") from e
        except ValueError as e:
            raise FetchError(f"JSON解析失敗: {url}") from e

    def fetch_from_cloud(self) -> list[WinningNumberSet]:
        """雲端取得所有期別的中獎號碼

        Returns:
            list[WinningNumberSet]: 中獎號碼(新到舊)

        Raises:
            FetchError: 取得失敗或資料格式不正確時
        """
        logger.info("檢查雲端中獎號碼: %s", self.settings.cloud_data_url)
        data = self._get_json(
            self.settings.cloud_data_url,
            params={"t": str(int(time.time() * 1000))},
        )

        if (
            not isinstance(data, list)
            or not data
            or not isinstance(data[0], dict)
            or not data[0].get("period")
        ):
            raise FetchError("雲端資料格式不正確")

        try:
            sets = [WinningNumberSet.model_validate(item) for item in data]
        except ValidationError as e:
            raise FetchError(f"雲端資料格式不正確: {e}") from e

        logger.info("雲端資料載入完成: 最新期別 %s (%d期)", sets[0].period, len(sets))
        return sets

    def fetch_from_api(self, term: str) -> WinningNumberSet:
        """財政部API取得指定期別的中獎號碼

        Args:
            term: 期別代碼(例: 11310)

        Returns:
            WinningNumberSet: 中獎號碼

        Raises:
            FetchError: AppID未設定、API回傳錯誤、資料格式不正確時
        """
        if self.settings.invoice_app_id is None:
            raise FetchError("未設定AppID，無法呼叫API")

        logger.info("向API查詢期別: %s", term)
        data = self._get_json(
            self.settings.api_base_url,
            params={
                "version": "0.5",
                "type": "HP",
                "invTerm": term,
                "appID": self.settings.invoice_app_id.get_secret_value(),
            },
        )

        if not isinstance(data, dict):
            raise FetchError("API資料格式不正確")
        if str(data.get("code")) != "200":
            raise FetchError(f"API回傳錯誤: {data.get('msg') or 'Unknown error'}")

        try:
            return parse_api_response(data)
        except (KeyError, ValueError) as e:
            raise FetchError(f"API資料格式不正確: {e}") from e


def parse_api_response(data: dict[str, Any]) -> WinningNumberSet:
    """API回傳內容轉為中獎號碼

    Args:
        data: API回傳的JSON

    Returns:
        WinningNumberSet: 中獎號碼
    """
    first_prizes = [data.get(f"firstPrizeNo{i}") for i in range(1, 4)]
    sixth_prizes = [data.get(f"sixthPrizeNo{i}") for i in range(1, 4)]
    return WinningNumberSet(
        period=period_label_from_term(str(data["invoYm"])),
        special_prize=data.get("superPrizeNo") or "",
        grand_prize=data.get("spcPrizeNo") or "",
        first_prize_group=tuple(n for n in first_prizes if n),
        additional_sixth_prize=tuple(n for n in sixth_prizes if n),
    )
