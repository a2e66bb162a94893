"""Core domain types and logic."""

from .config import ConfigError, ReleaseConfig, load_config, resolve_config
from .errors import ErrorCode
from .model import AppBuild, Component, ImageReference, LocalImage
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "resolve_config",
    # errors
    "ErrorCode",
    # model
    "AppBuild",
    "Component",
    "ImageReference",
    "LocalImage",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
