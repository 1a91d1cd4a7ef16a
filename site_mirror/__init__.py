# site_mirror/__init__.py
"""
SiteMirror package initializer.
Defines package version; the command line lives in :mod:`site_mirror.cli`.
"""
__version__ = "0.1.0"
