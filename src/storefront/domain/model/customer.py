"""Customer contact data captured at checkout."""

from __future__ import annotations

from dataclasses import dataclass, fields

from storefront.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str
    tax_id: str  # CPF/CNPJ

    def missing_fields(self) -> list[str]:
        return [
            f.name
            for f in fields(self)
            if not str(getattr(self, f.name) or "").strip()
        ]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ValidationError(
                f"Customer fields are required: {', '.join(missing)}"
            )
