"""Registry of versioned file layouts."""

from dimob_gen.exceptions import ConfigurationError
from dimob_gen.layout.fields import LayoutVersion
from dimob_gen.layout.v1 import LAYOUT_V1

_LAYOUTS: dict[str, LayoutVersion] = {LAYOUT_V1.version: LAYOUT_V1}

DEFAULT_LAYOUT_VERSION = LAYOUT_V1.version


def get_layout(version: str = DEFAULT_LAYOUT_VERSION) -> LayoutVersion:
    """Return a registered layout by version."""
    try:
        return _LAYOUTS[version]
    except KeyError:
        raise ConfigurationError(
            f"Unknown layout version {version!r}; available: {', '.join(sorted(_LAYOUTS))}"
        ) from None


def register_layout(layout: LayoutVersion) -> None:
    """Register a new layout version. Existing versions are never replaced."""
    if layout.version in _LAYOUTS:
        raise ConfigurationError(f"Layout version {layout.version!r} is already registered")
    _LAYOUTS[layout.version] = layout


def available_versions() -> list[str]:
    return sorted(_LAYOUTS)
