"""Configuration for the pixel-image command line tool.

Values come from the process environment, optionally seeded from a .env
file. Variables already in os.environ are never overwritten. Without an
explicit --env-file, the nearest .env is found by walking up from the
working directory; the walk ends at the first directory containing .git
(file or dir), so a .env outside the repository is never picked up.

Recognised variables:

  PIXEL_IMAGE_QUALITY     JPEG quality 1-100 (default 100)
  PIXEL_IMAGE_BORDER      constant | replicate | reflect (default constant)
  PIXEL_IMAGE_LOG_LEVEL   logging level name (default WARNING)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pixel_image.core.image import BorderType

ENV_PREFIX = 'PIXEL_IMAGE_'


def find_dotenv(start: Path) -> Path | None:
    """Nearest .env at or above `start`, not crossing a .git boundary."""
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / '.env'
        if candidate.is_file():
            return candidate
        if (directory / '.git').exists():
            break
    return None


def read_dotenv(path: Path) -> dict[str, str]:
    """KEY=value pairs from a .env file; quotes stripped, comments skipped."""
    pairs: dict[str, str] = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if line.startswith('export '):
            line = line[len('export ') :].lstrip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            pairs[key] = value.strip().strip('"').strip("'")
    return pairs


def load_env(env_file: str | None = None) -> Path | None:
    """Seed os.environ from a .env file. Returns the file used, if any."""
    path = Path(env_file) if env_file else find_dotenv(Path.cwd())
    if path is None or not path.is_file():
        return None
    for key, value in read_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


@dataclass(frozen=True)
class Settings:
    quality: int = 100
    border: BorderType = BorderType.CONSTANT
    log_level: str = 'WARNING'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()

        raw_quality = env.get(f'{ENV_PREFIX}QUALITY')
        quality = defaults.quality
        if raw_quality:
            try:
                quality = int(raw_quality)
            except ValueError:
                raise ValueError(f'{ENV_PREFIX}QUALITY must be an integer, got {raw_quality!r}') from None
            if not 1 <= quality <= 100:
                raise ValueError(f'{ENV_PREFIX}QUALITY must be within 1-100, got {quality}')

        raw_border = env.get(f'{ENV_PREFIX}BORDER')
        border = defaults.border
        if raw_border:
            try:
                border = BorderType(raw_border.strip().lower())
            except ValueError:
                choices = ', '.join(b.value for b in BorderType)
                raise ValueError(f'{ENV_PREFIX}BORDER must be one of {choices}, got {raw_border!r}') from None

        log_level = (env.get(f'{ENV_PREFIX}LOG_LEVEL') or defaults.log_level).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f'{ENV_PREFIX}LOG_LEVEL is not a logging level: {log_level!r}')

        return cls(quality=quality, border=border, log_level=log_level)
