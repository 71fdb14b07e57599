"""Logging helpers for the asset dashboard."""

import logging

import config

ROOT_LOGGER_NAME = "asset_dashboard"


def get_logger(name=None):
    """Return a logger under the dashboard root, configuring the root once."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
        root.setLevel(config.LOG_LEVEL)
    if not name:
        return root
    return root.getChild(name)
