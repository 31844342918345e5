from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

from dotenv import dotenv_values

from .errors import ConfigurationError
from .logging import get_logger

log = get_logger("config")

DEFAULT_BASE_URL = "https://api.x.ai/v1/chat/completions"
DEFAULT_MODEL = "grok-4-latest"
DEFAULT_VISION_MODEL = "grok-3"
DEFAULT_TIMEOUT_SECONDS = 120

# Substrings that mark a text model id as able to take image input
_VISION_MARKERS = ("vision", "grok-3")


@dataclass(frozen=True)
class OcrConfig:
    """Settings for talking to the chat-completions endpoint.

    Resolved once (see :func:`load_config`) and handed to the service, which
    never reads the environment itself.
    """

    api_key: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    vision_model: str = DEFAULT_VISION_MODEL
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("XAI_API_KEY is not set. Define it in the environment or .env")
        return self.api_key


def _find_upwards(start_dir: str, filename: str) -> Optional[str]:
    """Return first matching file found when walking up from start_dir."""
    d = os.path.abspath(start_dir or ".")
    while True:
        candidate = os.path.join(d, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(d)
        if parent == d:
            return None
        d = parent


def _read_dotenv(dotenv_dir: str) -> Dict[str, str]:
    """Read key/value pairs from the nearest .env without touching os.environ."""
    path = _find_upwards(dotenv_dir, ".env")
    if not path:
        log.debug(f"No .env found starting from: {os.path.abspath(dotenv_dir)}")
        return {}
    values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    log.debug(f"Loaded {len(values)} key(s) from .env at {path}")
    return values


def _lookup(key: str, env: Dict[str, str]) -> Optional[str]:
    """Environment wins over .env; blank values count as unset."""
    for source in (os.environ, env):
        value = source.get(key)
        if value is not None and value.strip():
            return value.strip()
    return None


def resolve_vision_model(model: str, override: Optional[str] = None) -> str:
    """Pick the model id used for image requests.

    An explicit override wins. Otherwise the text model is reused when its
    name suggests it accepts images, else a known vision-capable default.
    """
    if override and override.strip():
        return override.strip()
    lower = (model or "").lower()
    if any(marker in lower for marker in _VISION_MARKERS):
        return model
    return DEFAULT_VISION_MODEL


def _parse_timeout(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = int(raw)
    except ValueError:
        log.warning(f"XAI_TIMEOUT={raw!r} is not an integer; using {DEFAULT_TIMEOUT_SECONDS}s")
        return DEFAULT_TIMEOUT_SECONDS
    if value <= 0:
        log.warning(f"XAI_TIMEOUT={raw!r} must be positive; using {DEFAULT_TIMEOUT_SECONDS}s")
        return DEFAULT_TIMEOUT_SECONDS
    return value


def load_config(dotenv_dir: str = ".") -> OcrConfig:
    """Resolve :class:`OcrConfig` from the environment and the nearest .env.

    A missing API key is not an error here; it is reported when an
    extraction is attempted so a caller can still start up and show it.
    """
    env = _read_dotenv(dotenv_dir)
    api_key = _lookup("XAI_API_KEY", env)
    if api_key:
        log.info("Using XAI_API_KEY from environment/.env")
    else:
        log.debug("XAI_API_KEY not found in env or .env")

    model = _lookup("XAI_MODEL", env) or DEFAULT_MODEL
    config = OcrConfig(
        api_key=api_key,
        base_url=_lookup("XAI_BASE_URL", env) or DEFAULT_BASE_URL,
        model=model,
        vision_model=resolve_vision_model(model, _lookup("XAI_VISION_MODEL", env)),
        timeout_seconds=_parse_timeout(_lookup("XAI_TIMEOUT", env)),
    )
    log.debug(
        "Resolved config: base_url=%s model=%s vision_model=%s timeout=%ss",
        config.base_url,
        config.model,
        config.vision_model,
        config.timeout_seconds,
    )
    return config
