"""Batch runner for newman collections across suite environments."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
