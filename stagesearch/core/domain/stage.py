"""Content lifecycle stages."""

from enum import Enum

from .exceptions import ValidationError


class Stage(str, Enum):
    """The two parallel lifecycle states a versioned record can occupy.

    The values are what gets written into the stage marker field and the
    trailing segment of a composite document identifier.
    """

    DRAFT = "Stage"
    LIVE = "Live"

    @classmethod
    def parse(cls, value: "str | Stage") -> "Stage":
        """Accept a stage value ("Stage", "Live") or member name ("draft", "live")."""
        if isinstance(value, Stage):
            return value
        for stage in cls:
            if value == stage.value or value.upper() == stage.name:
                return stage
        raise ValidationError(f"Unknown stage: {value!r}", context={"stage": value})

    @classmethod
    def all_values(cls) -> list[str]:
        """Stage marker used by records that are not independently versioned."""
        return [cls.LIVE.value, cls.DRAFT.value]
