"""CLI進入點模組

從命令列執行對獎、速查、更新或手動輸入中獎號碼、管理預存發票。
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import Settings, get_settings
from .fetcher import WinningNumberFetcher
from .models import WinningNumberSet
from .normalizer import DigitNormalizer
from .periods import MERGE_ALL, PeriodSelection
from .seed import SEED_WINNING_SETS
from .session import InvoiceSession
from .storage import LocalStore

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """設定日誌

    Args:
        debug: 除錯模式時為True
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _add_period_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--period",
        "-p",
        type=int,
        default=0,
        help="對獎期別的索引(0: 最新一期)",
    )
    group.add_argument(
        "--merge",
        "-m",
        action="store_true",
        help="所有已知期別一起對(四個月一起對)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """解析命令列參數

    Returns:
        argparse.Namespace: 解析後的參數
    """
    parser = argparse.ArgumentParser(
        prog="invoice-lottery",
        description="台灣統一發票對獎工具",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="啟用除錯模式",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="資料目錄(預設: 環境變數DATA_DIR或data)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="完整8碼對獎")
    check.add_argument("number", help="8碼發票號碼")
    _add_period_options(check)

    quick = subparsers.add_parser("quick", help="末3碼速查")
    quick.add_argument("suffix", help="末3碼")
    _add_period_options(quick)

    subparsers.add_parser("periods", help="列出已知期別與下期期別")
    subparsers.add_parser("refresh", help="更新中獎號碼")

    pending = subparsers.add_parser("pending", help="預存發票")
    pending_sub = pending.add_subparsers(dest="pending_command", required=True)
    pending_add = pending_sub.add_parser("add", help="新增預存發票")
    pending_add.add_argument("number", help="末3碼")
    pending_add.add_argument(
        "--period",
        type=str,
        default=None,
        help="對獎期別(例: 113年 11-12月，省略時為下一期)",
    )
    pending_sub.add_parser("list", help="列出預存發票")
    pending_delete = pending_sub.add_parser("delete", help="刪除預存發票")
    pending_delete.add_argument("id", type=int, help="預存發票ID")

    numbers = subparsers.add_parser("numbers", help="中獎號碼")
    numbers_sub = numbers.add_subparsers(dest="numbers_command", required=True)
    numbers_set = numbers_sub.add_parser("set", help="手動輸入一期中獎號碼")
    numbers_set.add_argument("period", help="期別(例: 113年 09-10月)")
    numbers_set.add_argument("--special", required=True, help="特別獎(8碼)")
    numbers_set.add_argument("--grand", required=True, help="特獎(8碼)")
    numbers_set.add_argument("--first", nargs="+", required=True, help="頭獎(8碼，可多個)")
    numbers_set.add_argument("--sixth", nargs="*", default=[], help="增開六獎(3碼，可多個)")

    history = subparsers.add_parser("history", help="中獎紀錄")
    history.add_argument("--clear", action="store_true", help="清除所有中獎紀錄")

    return parser.parse_args(argv)


def load_known_sets(store: LocalStore) -> list[WinningNumberSet]:
    """本機快取的中獎號碼。沒有快取時使用內建資料"""
    sets = store.load_winning_sets()
    if sets:
        return sets
    logger.debug("沒有中獎號碼快取，使用內建資料")
    return list(SEED_WINNING_SETS)


def _selection(args: argparse.Namespace) -> PeriodSelection:
    return MERGE_ALL if args.merge else PeriodSelection.single(args.period)


def run_command(args: argparse.Namespace, session: InvoiceSession, settings: Settings) -> int:
    """執行子命令

    Returns:
        int: 結束代碼
    """
    if args.command in ("check", "quick"):
        session.select_period(_selection(args))
        if args.command == "check":
            result = session.check_full(args.number)
            print(f"{result.tier.label}: {result.description}")
        else:
            quick_result = session.quick_check(args.suffix)
            print(quick_result.message or "請輸入3碼數字")
        return 0

    if args.command == "periods":
        for i, winnings in enumerate(session.known_sets):
            print(f"[{i}] {winnings.period}")
        print("下期: " + ", ".join(session.future_periods))
        return 0

    if args.command == "refresh":
        with WinningNumberFetcher(settings) as fetcher:
            updated = session.refresh(fetcher)
        print("已更新中獎號碼" if updated else "目前已是最新資料")
        session.check_pending_wins()
        return 0

    if args.command == "pending":
        if args.pending_command == "add":
            receipt = session.add_pending_receipt(args.number, args.period)
            print(f"已預存: {receipt.number} ({receipt.period}) id={receipt.id}")
        elif args.pending_command == "delete":
            session.delete_pending_receipt(args.id)
            print(f"已刪除: id={args.id}")
        else:
            session.check_pending_wins()
            for receipt in session.pending_receipts:
                check = session.pending_status(receipt)
                print(f"{receipt.id} {receipt.number} {receipt.period} {check.message}")
        return 0

    if args.command == "numbers":
        winnings = WinningNumberSet(
            period=args.period,
            special_prize=args.special,
            grand_prize=args.grand,
            first_prize_group=tuple(args.first),
            additional_sixth_prize=tuple(args.sixth),
        )
        session.set_winning_numbers(winnings)
        print(f"已設定中獎號碼: {winnings.period}")
        session.check_pending_wins()
        return 0

    if args.command == "history":
        if args.clear:
            session.clear_history()
            print("已清除中獎紀錄")
            return 0
        for record in session.history:
            print(f"{record.date} {record.period} {record.number} {record.prize_type} {record.amount}")
        return 0

    return 1


def main(argv: list[str] | None = None) -> int:
    """主要進入點

    Returns:
        int: 結束代碼(0: 成功, 1: 失敗)
    """
    args = parse_args(argv)

    # 讀取設定
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"讀取設定失敗: {e}", file=sys.stderr)
        print("請確認環境變數或.env檔。", file=sys.stderr)
        return 1

    # 命令列參數覆寫設定
    overrides: dict[str, object] = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.debug:
        overrides["debug"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(settings.debug)
    logger.debug("統一發票對獎工具 v%s", __version__)

    try:
        store = LocalStore(settings.data_dir)
        session = InvoiceSession(
            load_known_sets(store),
            store=store,
            normalizer=DigitNormalizer(settings.digit_mapping_file),
        )
        return run_command(args, session, settings)
    except ValueError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.exception("發生未預期的錯誤: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
