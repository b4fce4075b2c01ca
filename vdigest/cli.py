from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import load_config
from .digestor import Digestor
from .errors import VDUserError
from .extractors import TrackerStrategy
from .jsonic import dumps as jdumps
from .report import DependenciesReport, DigestReport, NestedDependenciesReport
from .version import tool_version


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("VD_DEBUG") else logging.WARNING
    log = logging.getLogger("vdigest")
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vdigest",
        description="Template dependency digests (view-digest)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для всех подкоманд
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("name", help="имя шаблона, например messages/show")
        sp.add_argument("--locale", help="локаль с наивысшим приоритетом (например: en)")
        sp.add_argument("--format", dest="fmt", help="формат с наивысшим приоритетом (например: html)")
        sp.add_argument("--variant", help="вариант шаблона (например: phone)")
        sp.add_argument(
            "--tracker",
            choices=[s.value for s in TrackerStrategy],
            help="стратегия поиска зависимостей (по умолчанию — из vdigest.yaml)",
        )

    sp_digest = sub.add_parser("digest", help="Дайджест шаблона (JSON)")
    add_common(sp_digest)
    sp_digest.add_argument(
        "--dep",
        action="append",
        metavar="TOKEN",
        help="дополнительный токен зависимости (можно указать несколько; порядок важен)",
    )

    sp_deps = sub.add_parser("deps", help="Прямые зависимости шаблона (JSON)")
    add_common(sp_deps)

    sp_tree = sub.add_parser("tree", help="Все зависимости шаблона во вложенном виде (JSON)")
    add_common(sp_tree)

    return p


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        cfg = load_config(Path.cwd())
        if ns.tracker:
            cfg.tracker = TrackerStrategy(ns.tracker)
        details = cfg.details.with_options(locale=ns.locale, fmt=ns.fmt, variant=ns.variant)
        digestor = Digestor.from_config(cfg)

        if ns.cmd == "digest":
            extra = list(ns.dep or [])
            report = DigestReport(
                name=ns.name,
                digest=digestor.digest(ns.name, details, extra),
                details=details.key,
                tracker=digestor.strategy.value,
                extra_dependencies=extra,
            )
            sys.stdout.write(jdumps(report.model_dump(mode="json", by_alias=True)))
            return 0

        if ns.cmd == "deps":
            report = DependenciesReport(name=ns.name, dependencies=digestor.dependencies(ns.name, details))
            sys.stdout.write(jdumps(report.model_dump(mode="json")))
            return 0

        if ns.cmd == "tree":
            report = NestedDependenciesReport(name=ns.name, tree=digestor.nested_dependencies(ns.name, details))
            sys.stdout.write(jdumps(report.model_dump(mode="json")))
            return 0

    except VDUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
