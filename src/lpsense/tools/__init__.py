"""Command-line entry points and debugging helpers.

:mod:`read_sensor` implements the ``lpsense-read`` command; :mod:`debug`
holds the ``LPSENSE_DEBUG`` switch, the :func:`time_block` timer and its
per-operation timing summary.
"""
