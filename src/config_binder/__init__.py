"""Bind flat key-value configuration files onto the fields of plain Python objects."""

from config_binder.errors import ConfigBinderError, FieldBindingError, FileAccessError, MalformedLineError
from config_binder.loader import ConfigLoader, load_into
from config_binder.models import ConfigEntry, Delimiter, LoadReport
from config_binder.settings import BinderSettings, LoaderSettings, LoggingSettings, read_settings

__all__ = [
    "BinderSettings",
    "ConfigBinderError",
    "ConfigEntry",
    "ConfigLoader",
    "Delimiter",
    "FieldBindingError",
    "FileAccessError",
    "LoadReport",
    "LoaderSettings",
    "LoggingSettings",
    "MalformedLineError",
    "load_into",
    "read_settings",
]
