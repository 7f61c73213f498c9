"""
Top‑level package for the FitCoach Pro API.

This file makes ``fitcoach_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``fitcoach_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
