from dataclasses import dataclass, fields, replace
from typing import Any


@dataclass(frozen=True)
class CollectionOptions:
    """
    Internal container for PagedCollection settings.
    Populated from an inner 'Meta' class and/or constructor arguments.
    """

    auto_start: bool = True
    item_type: Any | None = None  # Validated with pydantic when set
    discard_stale: bool = True  # Drop loads that settle after a newer refresh()

    @classmethod
    def from_meta(cls, meta_cls: type | None) -> "CollectionOptions":
        """
        Build options from a collection's inner Meta class.

        Args:
            meta_cls: The Meta class, or None for defaults

        Returns:
            CollectionOptions with the Meta attributes applied

        Raises:
            ValueError: If Meta declares an attribute that is not an option
        """
        if meta_cls is None:
            return cls()

        known = {f.name for f in fields(cls)}
        declared = {
            name: value for name, value in vars(meta_cls).items() if not name.startswith("__")
        }
        unknown = sorted(set(declared) - known)
        if unknown:
            raise ValueError(
                f"Unknown option(s) {', '.join(unknown)} in {meta_cls.__qualname__}; "
                f"expected one of: {', '.join(sorted(known))}"
            )
        return cls(**declared)

    def merged(self, **overrides: Any) -> "CollectionOptions":
        """Returns a copy with the given overrides applied. None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
