"""Shared helpers: logging setup and identifier generation."""

# Cotejo Pairing
# Copyright (C) 2025  Cotejo Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os
import uuid

from cotejopairing.constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV

ROOT_LOGGER_NAME = "cotejopairing"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        level_name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
        root.setLevel(getattr(logging, level_name, logging.WARNING))
    return root


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger attached to the package root logger.

    The root ``cotejopairing`` logger gets a single stream handler the first
    time this is called. Its level is read from ``COTEJO_LOG_LEVEL``.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        The named logger
    """
    _configure_root_logger()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int) -> None:
    """Change the level of the package root logger (used by ``--verbose``)."""
    _configure_root_logger().setLevel(level)


def generate_id(prefix: str) -> str:
    """Generate a unique identifier such as ``fight-3f2a9c1d0b7e``."""
    return f"{prefix.lower()}-{uuid.uuid4().hex[:12]}"
