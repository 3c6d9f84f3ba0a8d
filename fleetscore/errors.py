# fleetscore/errors.py

from __future__ import annotations


class FleetScoreError(Exception):
    """Base class for errors raised by the analysis core."""


class InvalidInputError(FleetScoreError, TypeError):
    """
    A caller passed an argument of the wrong kind (e.g. bytes instead of text,
    or something that is not a StandardsTree).
    """

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(f"{parameter}: {message}")


class StandardsConfigError(FleetScoreError, ValueError):
    """The standards document cannot be turned into a usable tree."""
