"""
main.py

Точка входа в систему сравнения публичного API двух версий компонента.

Запуск:
    python main.py baseline.json target.json
    python main.py baseline.json target.json -c apidiff.json -o markdown
    python main.py baseline.json target.json -o html --out report.html
    python main.py baseline.json target.json -f Contoso.Core -e "*.Internal.*" -vv
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from apidiff.config import load_configuration
from apidiff.core.constants import (
    EXIT_INVALID_ARGUMENTS,
    EXIT_UNEXPECTED_ERROR,
    REPORT_FORMATS,
    TOOL_NAME,
    VERSION,
)
from apidiff.core.exceptions import ApiDiffError, ConfigurationValidationError
from apidiff.pipeline import ApiDiffRunner, ExitCodeManager, Reporter

logger = logging.getLogger("apidiff")


class _ArgumentParser(argparse.ArgumentParser):
    """argparse завершает процесс с кодом 2; у нас это "ошибка сравнения"."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_INVALID_ARGUMENTS, f"{self.prog}: ошибка: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="apidiff",
        description=f"{TOOL_NAME}: сравнение публичного API двух снимков компонента",
    )

    parser.add_argument("baseline", help="JSON-снимок базовой версии")
    parser.add_argument("target", help="JSON-снимок целевой версии")

    parser.add_argument(
        "-c", "--config",
        help="JSON-файл конфигурации сравнения",
    )

    parser.add_argument(
        "-o", "--output",
        choices=list(REPORT_FORMATS),
        help="Формат отчёта (по умолчанию: из конфигурации, иначе console)",
    )

    parser.add_argument(
        "--out",
        help="Файл для сохранения отчёта (если не указан — вывод в stdout)",
    )

    parser.add_argument(
        "-f", "--filter",
        action="append",
        default=[],
        metavar="NAMESPACE",
        help="Сравнивать только указанные пространства имён (можно повторять)",
    )

    parser.add_argument(
        "-e", "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Исключить типы по шаблону с * и ? (можно повторять)",
    )

    parser.add_argument(
        "--no-fail-on-breaking",
        action="store_true",
        help="Не завершаться с кодом 1 при ломающих изменениях",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Подробный журнал (-v INFO, -vv DEBUG)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    return parser


def setup_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        # --- Конфигурация ---
        config = load_configuration(args.config).with_overrides(
            output_format=args.output,
            output_path=args.out,
            include_namespaces=args.filter,
            excluded_type_patterns=args.exclude,
            fail_on_breaking_changes=False if args.no_fail_on_breaking else None,
        )

        # --- Сравнение ---
        reporter = Reporter()
        runner = ApiDiffRunner(config, reporter)
        report = runner.run(args.baseline, args.target)

        # --- Экспорт ---
        output = reporter.export(
            report,
            format=config.output_format,
            output_file=config.output_path,
        )
        if output:
            print(output)

        return ExitCodeManager(config.fail_on_breaking_changes).for_result(runner.result)

    except ConfigurationValidationError as e:
        print(f"Ошибка конфигурации: {e.message}", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return ExitCodeManager.for_exception(e)
    except (ApiDiffError, OSError) as e:
        logger.debug("Подробности ошибки", exc_info=True)
        print(f"Ошибка: {e}", file=sys.stderr)
        if isinstance(e, ApiDiffError) and e.details.get("errors"):
            for error in e.details["errors"]:
                print(f"  - {error}", file=sys.stderr)
        return ExitCodeManager.for_exception(e)
    except Exception:
        logger.exception("Непредвиденная ошибка")
        return EXIT_UNEXPECTED_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
