from __future__ import annotations

"""
CLI for inspecting a mod's metadata.

WHY THIS FILE EXISTS:
Mod authors need to see what the loader will make of their everest.yaml
(resolved DLL path, repaired dependencies) without starting the host.

Usage:
  everest-mod show <mod directory or .zip> [--config config/loader.json] [--log-dir logs]
"""

import argparse
import json
import sys
import zipfile
from typing import Any, Dict, List, Optional

from everest.core.config.io import load_loader_config
from everest.core.config.models import LoaderConfig
from everest.core.errors import EverestError
from everest.core.logger import get_logger, setup_logging
from everest.core.modules.parser import parse_metadata_at


def metadata_show_payload(path: str, *, config: Optional[LoaderConfig] = None, logger: Any = None) -> Dict[str, Any]:
    """
    Build `show` output: display string + normalized metadata, or an error.
    """
    cfg = config or LoaderConfig()
    try:
        meta = parse_metadata_at(path, config=cfg, logger=logger)
    except (OSError, zipfile.BadZipFile) as e:
        return {"ok": False, "error": str(e)[:300]}
    if meta is None:
        return {"ok": False, "error": "metadata_invalid (see log)"}
    doc = meta.to_document()
    doc["PathArchive"] = meta.path_archive
    doc["PathDirectory"] = meta.path_directory
    return {"ok": True, "display": str(meta), "metadata": doc}


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="everest-mod", description="Inspect Everest mod metadata.")
    sub = p.add_subparsers(dest="command", required=True)
    show = sub.add_parser("show", help="Parse and print a mod's metadata.")
    show.add_argument("path", help="Mod directory or .zip archive.")
    show.add_argument("--config", default="", help="Path to loader.json (defaults are used if omitted).")
    show.add_argument("--log-dir", default="logs", help="Directory for everest.log.")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_dir)
    try:
        cfg = load_loader_config(args.config or None)
    except EverestError as e:
        print(json.dumps({"ok": False, "error": e.to_dict()}, indent=2))
        return 1
    payload = metadata_show_payload(args.path, config=cfg, logger=get_logger(cfg.log_category))
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if payload.get("ok") else 1


if __name__ == "__main__":
    sys.exit(main())
