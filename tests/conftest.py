from __future__ import annotations

import logging
import os
from typing import List, Tuple

import pytest


class RecordingLogger:
    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def info(self, msg, *_a, **_k):
        self.records.append(("info", str(msg)))

    def warning(self, msg, *_a, **_k):
        self.records.append(("warning", str(msg)))

    def error(self, msg, *_a, **_k):
        self.records.append(("error", str(msg)))

    @property
    def problems(self) -> List[str]:
        return [m for (lvl, m) in self.records if lvl in {"warning", "error"}]


@pytest.fixture
def rec_logger():
    return RecordingLogger()


@pytest.fixture
def make_mod_dir(tmp_path):
    """
    Writes <tmp_path>/<name>/<file_name> with the given text and returns the mod dir.
    """

    def _make(name: str, text: str, file_name: str = "everest.yaml") -> str:
        mod_dir = os.path.join(str(tmp_path), name)
        os.makedirs(mod_dir, exist_ok=True)
        with open(os.path.join(mod_dir, file_name), "w", encoding="utf-8") as f:
            f.write(text)
        return mod_dir

    return _make


@pytest.fixture
def restore_everest_logger():
    """
    setup_logging() mutates the process-wide `everest` logger; put it back.
    """
    root = logging.getLogger("everest")
    handlers, propagate, level = list(root.handlers), root.propagate, root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.propagate = propagate
    root.setLevel(level)
