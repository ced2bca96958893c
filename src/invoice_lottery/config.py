"""設定管理模組

從環境變數讀取設定，提供整個應用程式使用。
"""

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """應用程式設定

    從環境變數或.env檔讀取。
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 中獎號碼來源
    cloud_data_url: str = Field(
        default="https://raw.githubusercontent.com/up2you/lottery/main/public/lottery-data.json",
        description="雲端中獎號碼JSON的URL",
    )
    api_base_url: str = Field(
        default="https://api.einvoice.nat.gov.tw/PB2CAPIVAN/invapp/InvApp",
        description="財政部電子發票API的URL",
    )
    invoice_app_id: SecretStr | None = Field(
        default=None,
        description="財政部電子發票API的AppID(未設定時不呼叫API)",
    )

    # 本機資料
    data_dir: Path = Field(
        default=Path("data"),
        description="中獎紀錄、預存發票的儲存目錄",
    )
    digit_mapping_file: Path | None = Field(
        default=None,
        description="語音數字對應的追加檔(YAML)",
    )

    # 通訊設定
    timeout: float = Field(
        default=10.0,
        description="逾時(秒)",
    )
    max_retries: int = Field(
        default=3,
        description="最大重試次數",
    )
    retry_min_wait: float = Field(
        default=1.0,
        description="重試最短等待時間(秒)",
    )
    retry_max_wait: float = Field(
        default=8.0,
        description="重試最長等待時間(秒)",
    )

    debug: bool = Field(
        default=False,
        description="除錯模式(true: 輸出除錯訊息)",
    )


def get_settings() -> Settings:
    """取得設定

    Returns:
        Settings: 應用程式設定
    """
    return Settings()
