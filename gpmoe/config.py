# gpmoe/config.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import os
import logging

_BACKENDS = ("numpy",)

# Read version from VERSION file
_version_file = os.path.join(os.path.dirname(__file__), "..", "VERSION")
try:
    with open(os.path.abspath(_version_file), "r") as f:
        __version__ = f.read().strip()
except FileNotFoundError:
    __version__ = "0.0.0"


class _GPMOEConfig:
    def __init__(self):
        self.version = __version__
        self.backend = None
        self.dtype = float
        self.dtype_resolved = None
        self.caches = {}
        # logger lives in config
        self.logger = logging.getLogger("gpmoe")
        if not self.logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            self.logger.addHandler(h)
        self.logger.setLevel(logging.INFO)

    def __str__(self):
        return (
            f"GPMOEConfig("
            f"version={self.version}, "
            f"backend={self.backend}, "
            f"dtype={self.dtype}, "
            f"caches={list(self.caches.keys())})"
        )

    def __repr__(self):
        return (
            f"<GPMOEConfig "
            f"version={self.version!r}, "
            f"backend={self.backend!r}, "
            f"dtype={self.dtype!r}, "
            f"caches={list(self.caches.keys())}>"
        )

    def update(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)
        return self

    def clear_caches(self, name=None):
        if name is None:
            self.caches.clear()
        else:
            self.caches.pop(name, None)


_config = _GPMOEConfig()


def get_config():
    return _config


def _detect_backend():
    env = os.environ.get("GPMOE_BACKEND")
    if env is not None and env not in _BACKENDS:
        raise RuntimeError(
            f"Unsupported GPMOE_BACKEND {env!r}; available: {', '.join(_BACKENDS)}"
        )
    return "numpy"


def init_backend():
    """Idempotent. Detect and store backend, set env for downstream imports."""
    if _config.backend is None:
        backend = _detect_backend()
        _config.backend = backend
        os.environ["GPMOE_BACKEND"] = backend
    return _config.backend


def set_backend(backend: str):
    """Force a backend before importing gpmoe.num."""
    if backend not in _BACKENDS:
        raise ValueError(f"backend must be one of {_BACKENDS}")
    _config.backend = backend
    os.environ["GPMOE_BACKEND"] = backend


def get_backend():
    """Return current backend; triggers detection if not set."""
    return _config.backend or init_backend()


def set_dtype(dtype):
    _config.dtype = dtype


def clear_caches(name=None):
    _config.clear_caches(name)


def get_logger():
    return _config.logger


def set_log_level(level):
    _config.logger.setLevel(level)
