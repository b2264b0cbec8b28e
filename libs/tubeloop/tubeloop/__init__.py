"""TubeLoop: loop segments over embedded videos, shareable by link."""

__version__ = "0.1.0"
