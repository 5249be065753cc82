"""Validator registry for mailform.

Maps value-rule spec types (Pattern, Inclusion, LengthRange, and any
application-defined spec) to the factories that build their validators.
"""

from typing import Any, Callable

from mailform.declarations.types import Inclusion, LengthRange, Pattern
from mailform.validation.types import Validator
from mailform.validation.validators import (
    FormatValidator,
    InclusionValidator,
    LengthValidator,
)

# Factory signature: (field_name, spec) -> Validator
ValidatorFactory = Callable[[str, Any], Validator]


class ValidatorRegistry:
    """Registry for value-rule validator factories.

    Factories must be registered before a declaration can carry their spec
    type. The built-in ones are registered by register_builtin_validators().

    Example:
        @dataclass(frozen=True)
        class Postcode:
            country: str

        ValidatorRegistry.register_factory(Postcode, PostcodeValidator)
    """

    _factories: dict[type, ValidatorFactory] = {}

    @classmethod
    def register_factory(cls, spec_type: type, factory: ValidatorFactory) -> None:
        """Register a factory for a spec type.

        Idempotent - re-registering the same spec type is a no-op.
        """
        if spec_type in cls._factories:
            return
        cls._factories[spec_type] = factory

    @classmethod
    def create(cls, field: str, spec: Any) -> Validator:
        """Create the validator for ``field`` from a spec.

        Raises:
            ValueError: If no factory is registered for the spec type
        """
        spec_type = type(spec)
        if spec_type not in cls._factories:
            raise ValueError(
                f"No validator registered for '{spec_type.__name__}'. "
                "Available types: " + ", ".join(cls.list_registered())
            )
        return cls._factories[spec_type](field, spec)

    @classmethod
    def is_registered(cls, spec_type: type) -> bool:
        return spec_type in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(t.__name__ for t in cls._factories)

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._factories.clear()


def register_builtin_validators() -> None:
    """Register the format, inclusion and length validators."""
    ValidatorRegistry.register_factory(Pattern, FormatValidator)
    ValidatorRegistry.register_factory(Inclusion, InclusionValidator)
    ValidatorRegistry.register_factory(LengthRange, LengthValidator)
