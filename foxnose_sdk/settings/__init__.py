"""Settings package."""

from foxnose_sdk.settings.app import FoxnoseSettings, get_settings


__all__ = ["FoxnoseSettings", "get_settings"]
