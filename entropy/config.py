"""
Entropy accumulator configuration.

Operational bounds for the seed protocol plus local-host knobs:

- Length caps derived from the host's metering budget (random output,
  entropy contribution, callback input, serialized callback payload)
- Local reference-host storage location (SQLite file)
- Metrics toggle

Provides:
- a dataclass-based config with validation,
- loading from environment variables (prefix configurable),
- loading from a JSON or YAML file.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict

import yaml

from .constants import (
    DEFAULT_MAX_CALLBACK_INPUT_BYTES,
    DEFAULT_MAX_CALLBACK_PAYLOAD_BYTES,
    DEFAULT_MAX_ENTROPY_BYTES,
    DEFAULT_MAX_RANDOM_BYTES,
    SEED_KEY,
)

# Hard ceiling for any configured length: a single invocation must stay well
# inside a block's execution budget whatever operators put in the env.
_ABS_MAX_BYTES = 16 * 1024 * 1024


@dataclass
class EntropyConfig:
    """
    Bounds (all in bytes):
      - max_random_bytes: largest `GetRandom.bytes` accepted
      - max_entropy_bytes: largest `AddEntropy.entropy` accepted
      - max_callback_input_bytes: largest `GetRandom.callback_input` accepted
      - max_callback_payload_bytes: largest serialized callback payload

    Local host:
      - store_path: SQLite file used by the CLI's reference host
      - metrics_enabled: record Prometheus metrics from the handler
    """

    max_random_bytes: int = DEFAULT_MAX_RANDOM_BYTES
    max_entropy_bytes: int = DEFAULT_MAX_ENTROPY_BYTES
    max_callback_input_bytes: int = DEFAULT_MAX_CALLBACK_INPUT_BYTES
    max_callback_payload_bytes: int = DEFAULT_MAX_CALLBACK_PAYLOAD_BYTES

    store_path: str = "./data/entropy/state.db"
    metrics_enabled: bool = True

    @property
    def seed_key(self) -> bytes:
        return SEED_KEY

    def validate(self) -> None:
        for name in (
            "max_random_bytes",
            "max_entropy_bytes",
            "max_callback_input_bytes",
            "max_callback_payload_bytes",
        ):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise ValueError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be >= 0")
            if v > _ABS_MAX_BYTES:
                raise ValueError(f"{name} must be <= {_ABS_MAX_BYTES}")
        # base64 inflates by 4/3; the payload cap must leave room for a full answer.
        min_payload = 4 * ((self.max_random_bytes + 2) // 3)
        if self.max_callback_payload_bytes < min_payload:
            raise ValueError(
                f"max_callback_payload_bytes ({self.max_callback_payload_bytes}) cannot hold "
                f"a base64 answer of max_random_bytes ({self.max_random_bytes}); need >= {min_payload}"
            )
        if not self.store_path:
            raise ValueError("store_path must be non-empty")

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "ANIMICA_ENTROPY_") -> "EntropyConfig":
        """
        Load configuration from environment variables. All variables are optional.

          - ANIMICA_ENTROPY_MAX_RANDOM_BYTES=65536
          - ANIMICA_ENTROPY_MAX_ENTROPY_BYTES=65536
          - ANIMICA_ENTROPY_MAX_CALLBACK_INPUT_BYTES=65536
          - ANIMICA_ENTROPY_MAX_CALLBACK_PAYLOAD_BYTES=262144
          - ANIMICA_ENTROPY_STORE_PATH=./data/entropy/state.db
          - ANIMICA_ENTROPY_METRICS=true
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                if cast is bool:
                    return raw.strip().lower() in {"1", "true", "yes", "on"}
                if cast is int:
                    return int(raw, 0)
                return cast(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = EntropyConfig(
            max_random_bytes=_get("MAX_RANDOM_BYTES", int, DEFAULT_MAX_RANDOM_BYTES),
            max_entropy_bytes=_get("MAX_ENTROPY_BYTES", int, DEFAULT_MAX_ENTROPY_BYTES),
            max_callback_input_bytes=_get(
                "MAX_CALLBACK_INPUT_BYTES", int, DEFAULT_MAX_CALLBACK_INPUT_BYTES
            ),
            max_callback_payload_bytes=_get(
                "MAX_CALLBACK_PAYLOAD_BYTES", int, DEFAULT_MAX_CALLBACK_PAYLOAD_BYTES
            ),
            store_path=_get("STORE_PATH", str, "./data/entropy/state.db"),
            metrics_enabled=_get("METRICS", bool, True),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "EntropyConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        fields; missing keys keep their defaults. Example (YAML):

            max_random_bytes: 4096
            max_entropy_bytes: 1024
            store_path: "./data/entropy/devnet.db"
        """
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        data = _parse_json_or_yaml(text, path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at the top level")

        known = set(EntropyConfig.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys in {path!r}: {', '.join(unknown)}")

        cfg = EntropyConfig(**data)
        cfg.validate()
        return cfg


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


DEFAULT: EntropyConfig = EntropyConfig()

__all__ = [
    "EntropyConfig",
    "DEFAULT",
]
