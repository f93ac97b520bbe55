from __future__ import annotations


class ToggleplotError(Exception):
    """Base class for toggleplot failures."""


class MalformedDatasetError(ToggleplotError, ValueError):
    """Dataset does not match the columns/colors/names contract."""


class UnknownMessageError(ToggleplotError, TypeError):
    """Reducer received a message outside the closed message set."""

    def __init__(self, message: object) -> None:
        super().__init__(f"unsupported message: {type(message).__name__}")
        self.message = message
