from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import load_config, load_yaml_file
from .environment import SkinEnvironment
from .errors import SkinUserError
from .template.parser import convert_literal
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="skin",
        description="Skin templating engine",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument(
        "--root",
        default=".",
        help="корень проекта (каталог со skin.yaml), по умолчанию текущий",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="отладочное логирование в stderr",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Отрендерить скин и вывести текст")
    sp_render.add_argument(
        "target",
        help="ссылка на скин: <path> или <path>#<subskin>",
    )
    sp_render.add_argument(
        "--context",
        metavar="FILE",
        help="YAML/JSON-файл с контекстом рендеринга",
    )
    sp_render.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="значение контекста (можно указать несколько; перекрывает --context)",
    )

    sub.add_parser("list", help="Список доступных скинов (JSON)")

    return p


def _parse_sets(items: Optional[List[str]]) -> Dict[str, Any]:
    """Парсит список 'key=value' в словарь; значения типизируются как литералы тегов."""
    result: Dict[str, Any] = {}
    if not items:
        return result
    for item in items:
        if "=" not in item:
            raise ValueError(f"Invalid --set format '{item}'. Expected 'key=value'")
        key, value = item.split("=", 1)
        value = value.strip()
        result[key.strip()] = convert_literal(value) if value else ""
    return result


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _configure_logging(bool(ns.verbose))

    try:
        root = Path(ns.root).resolve()
        env = SkinEnvironment(root, config=load_config(root))

        if ns.cmd == "render":
            context: Dict[str, Any] = {}
            if ns.context:
                context.update(load_yaml_file(Path(ns.context)))
            context.update(_parse_sets(ns.set))
            sys.stdout.write(env.render(ns.target, context))
            return 0

        if ns.cmd == "list":
            data = {"skins": env.list_skins()}
            sys.stdout.write(json.dumps(data, ensure_ascii=False, indent=2) + "\n")
            return 0

    except SkinUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
