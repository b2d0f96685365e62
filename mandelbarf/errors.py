"""Exceptions raised by the rendering pipeline."""


class MandelbarfError(Exception):
    """Base class for every error raised by :mod:`mandelbarf`."""


class ConfigurationError(MandelbarfError, ValueError):
    """Render parameters that cannot produce a valid image."""


class RenderError(MandelbarfError):
    """A worker failed while rendering a chunk of rows."""


class RenderCancelled(MandelbarfError):
    """Rendering stopped because the cancel event was set."""
