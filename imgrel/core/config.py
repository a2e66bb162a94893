"""Typed release configuration.

The configuration is read once at startup from an optional TOML file and is
immutable afterwards. Every key has a default, so an empty (or absent) file
yields a working configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .model import BACKEND, COMPONENT_NAMES, FRONTEND, AppBuild, Component, ImageReference
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_REGISTRY_URL",
    "DEFAULT_REGION",
    "DEFAULT_IMAGE_TAG",
    "DEFAULT_PLATFORM",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "resolve_config",
]

CONFIG_FILENAME = "imgrel.toml"

DEFAULT_REGISTRY_URL = "654553612832.dkr.ecr.eu-central-1.amazonaws.com"
DEFAULT_REGION = "eu-central-1"
DEFAULT_IMAGE_TAG = "latest"
DEFAULT_PLATFORM = "linux/amd64"

_DEFAULT_IMAGES = {
    FRONTEND: "agents/frontend",
    BACKEND: "agents/backend",
}
_DEFAULT_ENV_FILES: dict[str, str | None] = {
    FRONTEND: ".env.local",
    BACKEND: None,
}
_DEFAULT_CLEAN = ("dist", "out", ".next")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or is invalid."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Process-wide release configuration."""

    registry_url: str
    region: str
    image_tag: str
    platform: str
    components: tuple[Component, ...]

    def component(self, name: str) -> Component:
        """Look up a component by name.

        Raises:
            KeyError: If no component has that name.
        """
        for c in self.components:
            if c.name == name:
                return c
        raise KeyError(name)

    def remote_ref(self, component: Component) -> ImageReference:
        return ImageReference(
            registry=self.registry_url,
            repository=component.image_name,
            tag=self.image_tag,
        )

    @classmethod
    def default(cls, base_dir: Path) -> ReleaseConfig:
        return cls.from_dict({}, base_dir=base_dir)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path) -> ReleaseConfig:
        """Create a config from parsed TOML.

        Raises:
            ValueError: On unknown components or duplicate image names.
        """
        registry: StrDict = get_table(data, "registry") or {}
        image: StrDict = get_table(data, "image") or {}
        components: StrDict = get_table(data, "components") or {}

        unknown = sorted(set(components) - set(COMPONENT_NAMES))
        if unknown:
            raise ValueError(f"unknown component(s): {', '.join(unknown)}")

        parsed = tuple(
            _parse_component(name, get_table(components, name) or {}, base_dir)
            for name in COMPONENT_NAMES
        )

        seen: set[str] = set()
        for c in parsed:
            if c.image_name in seen:
                raise ValueError(f"duplicate image name: {c.image_name}")
            seen.add(c.image_name)

        return cls(
            registry_url=get_str(registry, "url") or DEFAULT_REGISTRY_URL,
            region=get_str(registry, "region") or DEFAULT_REGION,
            image_tag=get_str(image, "tag") or DEFAULT_IMAGE_TAG,
            platform=get_str(image, "platform") or DEFAULT_PLATFORM,
            components=parsed,
        )


def _parse_component(name: str, table: StrDict, base_dir: Path) -> Component:
    context = Path(get_str(table, "context") or name)
    if not context.is_absolute():
        context = base_dir / context

    # An explicit empty string disables the guarded env file.
    if "env_file" in table:
        env_file = get_str(table, "env_file")
    else:
        env_file = _DEFAULT_ENV_FILES[name]

    app: StrDict = get_table(table, "app_build") or {}
    clean = get_str_list(app, "clean")
    app_build = AppBuild(
        enabled=get_bool(app, "enabled") or False,
        env=get_str(app, "env"),
        clean=tuple(clean) if clean is not None else _DEFAULT_CLEAN,
    )
    for rel in app_build.clean:
        parts = Path(rel).parts
        if not parts or Path(rel).is_absolute() or ".." in parts:
            raise ValueError(f"{name}: app_build.clean entry outside build context: {rel!r}")
    if app_build.env is not None and env_file is None:
        raise ValueError(f"{name}: app_build.env requires env_file")

    return Component(
        name=name,
        image_name=get_str(table, "image") or _DEFAULT_IMAGES[name],
        build_context=context,
        env_file=env_file,
        app_build=app_build,
    )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_bytes().decode("utf-8")))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load configuration from a TOML file.

    Relative build contexts resolve against the file's directory.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value, base_dir=path.parent))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def resolve_config(path: Path | None, cwd: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load an explicit config file, else ``imgrel.toml`` in cwd, else defaults."""
    if path is not None:
        return load_config(path)
    candidate = cwd / CONFIG_FILENAME
    if candidate.is_file():
        return load_config(candidate)
    return Ok(ReleaseConfig.default(cwd))
