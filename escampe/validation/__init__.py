from .data_checks import InvalidInputError, validate_state

__all__ = ["InvalidInputError", "validate_state"]
