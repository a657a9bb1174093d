# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration helpers for the ``modfs-conformance`` entry point."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, cast

import yaml

from ..errors import ModfsError

DEFAULT_CONFIG_PATH = Path("~/.config/modfs/config.toml")

ENV_MODULES = "MODFS_MODULES"
ENV_SCHEMES = "MODFS_SCHEMES"
ENV_SCENARIOS = "MODFS_SCENARIOS"
ENV_TMP_DIR = "MODFS_TMP_DIR"
ENV_FORMAT = "MODFS_FORMAT"

OutputFormat = Literal["text", "json"]
_FORMATS: tuple[OutputFormat, ...] = ("text", "json")

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "HarnessConfig",
    "OutputFormat",
    "load_config",
]


@dataclass(frozen=True, slots=True)
class HarnessConfig:
    """Resolved configuration of a conformance run.

    ``schemes`` is ``None`` when no selection was made anywhere, meaning
    "test every available scheme"; an empty string inside it selects the
    local backend.
    """

    modules: tuple[str, ...] = ()
    schemes: tuple[str, ...] | None = None
    scenarios: tuple[str, ...] = ()
    tmp_dir: Path | None = None
    output_format: OutputFormat = "text"


class ConfigError(ModfsError, ValueError):
    """Raised when the harness configuration is invalid."""


def load_config(
    path: Path | Mapping[str, Any] | None,
    cli_overrides: Mapping[str, object] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> HarnessConfig:
    """Load and validate the harness configuration.

    Parameters
    ----------
    path:
        Path to a TOML or YAML file. ``None`` falls back to
        ``~/.config/modfs/config.toml``, which may be absent. Tests may pass
        an in-memory mapping to skip filesystem I/O.
    cli_overrides:
        Values from command line flags keyed by ``HarnessConfig`` field
        name; ``None`` values are ignored.
    env:
        Optional environment mapping. Defaults to :data:`os.environ`.
    """

    env_map = dict(os.environ if env is None else env)

    if isinstance(path, Mapping):
        raw: dict[str, object] = dict(cast(Mapping[str, object], path))
    else:
        config_path = path if path is not None else DEFAULT_CONFIG_PATH.expanduser()
        raw = _load_config_file(config_path)

    config = _normalise_config(raw)
    _apply_environment_overrides(config=config, env=env_map)
    for key, value in (cli_overrides or {}).items():
        if value is not None:
            config[key] = value
    return _build_config(config)


def _load_config_file(path: Path) -> dict[str, object]:
    if not path.exists():
        if path == DEFAULT_CONFIG_PATH.expanduser():
            return {}
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg)

    suffix = path.suffix.lower()
    data: object
    try:
        if suffix == ".toml" or not suffix:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        elif suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        else:
            msg = f"Unsupported configuration format: {path.suffix}"
            raise ConfigError(msg)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as error:
        msg = f"Invalid configuration file {path}: {error}"
        raise ConfigError(msg) from error

    if not isinstance(data, MutableMapping):
        msg = "Configuration file must contain a mapping at the root."
        raise ConfigError(msg)

    typed_data: dict[str, object] = {}
    for key, value in cast(MutableMapping[object, object], data).items():
        if not isinstance(key, str):
            msg = f"Configuration keys must be strings (got {key!r})."
            raise ConfigError(msg)
        typed_data[key] = value
    return typed_data


def _normalise_config(raw: Mapping[str, object]) -> dict[str, object]:
    section_obj = raw.get("harness")
    if isinstance(section_obj, Mapping):
        raw = {**raw, **cast(Mapping[str, object], section_obj)}

    config: dict[str, object] = {}
    for key, aliases in (
        ("modules", ("modules", "plugins")),
        ("schemes", ("schemes",)),
        ("scenarios", ("scenarios",)),
        ("tmp_dir", ("tmp_dir", "temp_dir")),
        ("output_format", ("output_format", "format")),
    ):
        for alias in aliases:
            if alias in raw:
                config[key] = raw[alias]
                break
    return config


def _apply_environment_overrides(
    *, config: dict[str, object], env: Mapping[str, str]
) -> None:
    if ENV_MODULES in env:
        config["modules"] = _split_list(env[ENV_MODULES], drop_empty=True)
    if ENV_SCHEMES in env:
        config["schemes"] = _split_list(env[ENV_SCHEMES], drop_empty=False)
    if ENV_SCENARIOS in env:
        config["scenarios"] = _split_list(env[ENV_SCENARIOS], drop_empty=True)
    if ENV_TMP_DIR in env:
        config["tmp_dir"] = env[ENV_TMP_DIR]
    if ENV_FORMAT in env:
        config["output_format"] = env[ENV_FORMAT]


def _split_list(value: str, *, drop_empty: bool) -> tuple[str, ...]:
    items = tuple(item.strip() for item in value.split(","))
    if drop_empty:
        return tuple(item for item in items if item)
    return items


def _build_config(config: Mapping[str, object]) -> HarnessConfig:
    schemes_obj = config.get("schemes")
    tmp_dir_obj = config.get("tmp_dir")
    format_obj = config.get("output_format", "text")

    if format_obj not in _FORMATS:
        msg = f"output_format must be one of {', '.join(_FORMATS)} (got {format_obj!r})."
        raise ConfigError(msg)
    if tmp_dir_obj is not None and not isinstance(tmp_dir_obj, (str, Path)):
        msg = "tmp_dir must be a path string."
        raise ConfigError(msg)

    return HarnessConfig(
        modules=_coerce_strings("modules", config.get("modules", ())),
        schemes=None if schemes_obj is None else _coerce_strings("schemes", schemes_obj),
        scenarios=_coerce_strings("scenarios", config.get("scenarios", ())),
        tmp_dir=None if tmp_dir_obj is None else Path(tmp_dir_obj).expanduser(),
        output_format=cast(OutputFormat, format_obj),
    )


def _coerce_strings(field_name: str, value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        msg = f"{field_name} must be a list of strings."
        raise ConfigError(msg)
    items = cast(list[object] | tuple[object, ...], value)
    if not all(isinstance(item, str) for item in items):
        msg = f"{field_name} must only contain strings."
        raise ConfigError(msg)
    return tuple(cast(list[str] | tuple[str, ...], items))
