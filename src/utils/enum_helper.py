"""Enum conversion utilities for config parsing"""

from enum import Enum
from typing import TypeVar, Type, List, Any

E = TypeVar("E", bound=Enum)


class EnumHelper:
    """
    Helpers for turning YAML strings into enum members and back.
    """

    @staticmethod
    def to_enum(enum_class: Type[E], value: Any) -> E:
        """
        Convert a member or a case-insensitive member name to an enum member.

        Raises:
            ValueError: Unknown name (message lists the valid names)
            TypeError: Value is neither a member nor a string
        """
        if isinstance(value, enum_class):
            return value
        if isinstance(value, str):
            try:
                return enum_class[value.strip().upper()]
            except KeyError:
                valid = ", ".join(EnumHelper.list_names(enum_class, lowercase=True))
                raise ValueError(
                    f"Invalid {enum_class.__name__} '{value}' (expected one of: {valid})"
                ) from None
        raise TypeError(f"Expected str or {enum_class.__name__}, got {type(value).__name__}")

    @staticmethod
    def to_string(enum_value: Enum, lowercase: bool = False) -> str:
        """Enum member name, optionally lowercased for config files"""
        if not isinstance(enum_value, Enum):
            raise TypeError(f"Expected Enum, got {type(enum_value).__name__}")
        name = enum_value.name
        return name.lower() if lowercase else name

    @staticmethod
    def list_names(enum_class: Type[E], lowercase: bool = False) -> List[str]:
        if lowercase:
            return [member.name.lower() for member in enum_class]
        return [member.name for member in enum_class]
