"""Flash message data model"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class Level(IntEnum):
    """Severity of a flash message, lowest first"""

    DEBUG = 0
    INFO = 1
    SUCCESS = 2
    WARNING = 3
    ERROR = 4

    @property
    def label(self) -> str:
        """Human readable name, e.g. ``Debug``"""
        return self.name.capitalize()


class FlashMessage(BaseModel):
    """A single leveled message.

    Serialized with the short keys ``l`` and ``m`` to keep the cookie small.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    level: Level = Field(alias="l")
    text: str = Field(alias="m")
