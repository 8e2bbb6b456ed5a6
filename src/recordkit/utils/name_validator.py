"""Name validation utilities for recordkit model types and columns.

Model type names become accessor and foreign key names through the inflector,
so both kinds of name must be plain identifiers.
"""

import keyword
import re


# Model type names: letters, digits and underscore, starting with a letter
VALID_MODEL_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# Column names: lowercase, must start with a letter
VALID_COLUMN_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")

# Public attributes and methods of Record; a column named like one of
# these would be shadowed by the class member on attribute reads
RESERVED_NAMES = {
    "id",
    "model_name",
    "schema",
    "store",
    "persisted",
    "dirty",
    "errors",
    "read_attribute",
    "write_attribute",
    "assign_attributes",
    "to_dict",
    "children",
    "owner",
    "valid",
    "save",
    "update_attributes",
    "destroy",
}


class InvalidNameError(ValueError):
    """Raised when a name doesn't meet validation requirements."""

    pass


def validate_name(name: str, entity_type: str = "column") -> None:
    """Validate that a name meets recordkit naming requirements.

    Valid names must:
    - Be a non-empty string of at most 63 characters
    - Start with a letter and contain only letters, digits and underscore
    - Be lowercase for columns and relation accessors
    - Not be a Python keyword or a reserved record attribute

    Args:
        name: The name to validate
        entity_type: Type of entity (model, column, accessor) for error messages

    Raises:
        InvalidNameError: If the name is invalid
    """
    if not name or not isinstance(name, str):
        raise InvalidNameError(f"{entity_type.capitalize()} name cannot be empty")

    if len(name) > 63:
        raise InvalidNameError(
            f"{entity_type.capitalize()} name cannot exceed 63 characters"
        )

    if entity_type == "model":
        if not VALID_MODEL_NAME_PATTERN.match(name):
            raise InvalidNameError(
                f"Invalid model name '{name}'. "
                f"Model names must start with a letter and contain only letters, "
                f"numbers (0-9), and underscore (_)."
            )
    else:
        if name != name.lower():
            raise InvalidNameError(
                f"{entity_type.capitalize()} name must be lowercase. "
                f"Use '{name.lower()}' instead of '{name}'"
            )
        if not VALID_COLUMN_NAME_PATTERN.match(name):
            raise InvalidNameError(
                f"Invalid {entity_type} name '{name}'. "
                f"{entity_type.capitalize()} names must contain only lowercase letters (a-z), "
                f"numbers (0-9), and underscore (_), and start with a letter."
            )
        if name in RESERVED_NAMES:
            raise InvalidNameError(
                f"'{name}' is a reserved name and cannot be used as a {entity_type} name"
            )

    if keyword.iskeyword(name):
        raise InvalidNameError(
            f"'{name}' is a Python keyword and cannot be used as a {entity_type} name"
        )


def is_valid_name(name: str, entity_type: str = "column") -> bool:
    """Check if a name is valid without raising an exception.

    Args:
        name: The name to check
        entity_type: Type of entity the name is for

    Returns:
        True if valid, False otherwise
    """
    try:
        validate_name(name, entity_type)
        return True
    except InvalidNameError:
        return False
