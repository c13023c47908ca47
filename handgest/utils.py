from __future__ import annotations

import random
from datetime import datetime
from pathlib import Path


def set_seed(seed: int) -> None:
    random.seed(seed)


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def timestamped_name(prefix: str, *, suffix: str = ".csv", now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{stamp}{suffix}"
