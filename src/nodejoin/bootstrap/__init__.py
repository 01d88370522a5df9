"""Bootstrap package for wiring the enrollment collaborators."""

from .bootstrap import AppContainer, bootstrap, build_redactor

__all__ = ["AppContainer", "bootstrap", "build_redactor"]
