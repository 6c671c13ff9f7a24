import enum


class RecordStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class AttributeType(str, enum.Enum):
    TEXT = "text"
    SELECT = "select"
    NUMBER = "number"
    BOOLEAN = "boolean"
    COLOR = "color"

    @property
    def uses_options(self) -> bool:
        return self in (AttributeType.SELECT, AttributeType.COLOR)
