"""Bundled physical model data files, loaded through :mod:`importlib.resources`."""
