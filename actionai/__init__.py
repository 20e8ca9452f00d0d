"""Run AI actions on desktop input, with OpenAI models and GNOME desktop services."""

__version__ = "0.1.0"
__all__ = ["__version__"]