from __future__ import annotations
import argparse
import json
import logging
import os
import sys

from .checker import CheckerError, run_checkers
from .config import CHECKER_NAMES, Config, ConfigError
from .documentation import Documentation
from .fixer import fix_files

EXIT_SIGNAL = 130


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docspell",
        description="ソースコードのドキュメントコメントとマークダウンから綴りの誤りを検出します",
    )
    p.add_argument("paths", nargs="*", default=["."], help="走査するファイル/ディレクトリ (既定: カレントディレクトリ)")
    p.add_argument("--json", action="store_true", help="JSONで出力")
    p.add_argument("-c", "--cfg", help="設定ファイル(docspell.toml / pyproject.toml / .json / .yaml)。ディレクトリなら docspell.toml を探す")
    p.add_argument("--checkers", help=f"使用するチェッカーをカンマ区切りで指定し、設定との積集合を取る ({', '.join(CHECKER_NAMES)})")
    p.add_argument("--fix", action="store_true", help="先頭の置換候補で自動修正して上書き保存")
    p.add_argument("-m", "--code", type=int, default=0, help="誤りが見つかった場合の終了コード (既定: 0)")
    p.add_argument("--no-recursive", dest="recursive", action="store_false", help="ディレクトリの中を再帰的に走査しない")
    p.add_argument("--jobs", type=int, default=1, help="チェッカーを並列実行するワーカー数")
    p.add_argument("-v", "--verbose", action="count", default=0, help="ログを詳しくする (-vv まで)")
    p.add_argument("-q", "--quiet", action="store_true", help="ログを出さない。-v より優先")
    p.add_argument("--print-config", action="store_true", help="全チェッカーを有効にした設定を標準出力に書いて終了")
    p.add_argument("--write-config", metavar="PATH", help="全チェッカーを有効にした設定ファイルを書き出して終了")
    p.add_argument("--force", action="store_true", help="--write-config で既存ファイルを上書きする")
    return p


def _configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.CRITICAL + 1
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, os.environ.get("DOCSPELL_LOG", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_config(args: argparse.Namespace) -> Config:
    if args.cfg:
        return Config.load_from(args.cfg)
    return Config.discover()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    try:
        if args.print_config or args.write_config:
            config = Config.full()
            if args.checkers:
                for warning in config.select_checkers(args.checkers.split(",")):
                    print(f"[warn] {warning}", file=sys.stderr)
            if args.print_config:
                print(config.to_toml(), end="")
            else:
                written = config.write_to(args.write_config, force=args.force)
                print(f"Wrote configuration to {written}")
            return 0

        config = _load_config(args)
        if args.checkers:
            for warning in config.select_checkers(args.checkers.split(",")):
                print(f"[warn] {warning}", file=sys.stderr)

        docu = Documentation.from_paths(args.paths, recursive=args.recursive)
        if docu.is_empty():
            print("[warn] 検査対象のドキュメントが見つかりません。", file=sys.stderr)
        suggestion_set = run_checkers(docu, config, jobs=args.jobs)
    except (ConfigError, CheckerError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return EXIT_SIGNAL

    suggestions = suggestion_set.sorted()
    if args.json:
        print(json.dumps([s.to_dict() for s in suggestions], ensure_ascii=False, indent=2))
    elif not suggestions:
        print("No issues found.")
    else:
        for s in suggestions:
            print(s)
        print(f"Total: {len(suggestions)} issue(s)")

    if args.fix and suggestions:
        touched = fix_files(suggestion_set)
        if touched:
            print(f"Fixed {len(touched)} file(s)")

    if suggestions:
        return args.code
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
