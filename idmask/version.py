"""Package version: the codec engine version, else the installed distribution's."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _dist_version

from .coder import Coder


def _resolve_version() -> str:
    engine = str(getattr(Coder, "ENGINE_VERSION", "")).strip()
    if engine:
        return engine
    try:
        return _dist_version("idmask")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _resolve_version()


__all__ = ["__version__"]
