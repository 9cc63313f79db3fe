"""Category aggregate, optionally nested under a parent category."""

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utc_now


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()
    created_at: DateTime(default=utc_now)
    updated_at: DateTime(default=utc_now)

    @classmethod
    def create(cls, name, description=None, parent_id=None):
        now = utc_now()
        return cls(
            name=_clean_name(name),
            description=description,
            parent_id=parent_id,
            created_at=now,
            updated_at=now,
        )

    def update(self, name: str | None = None, description: str | None = None) -> None:
        if name is not None:
            self.name = _clean_name(name)
        if description is not None:
            self.description = description
        self.updated_at = utc_now()

    def move_under(self, parent_id) -> None:
        if parent_id is not None and str(parent_id) == self.id:
            raise ValidationError({"parent_id": ["A category cannot be its own parent"]})
        self.parent_id = parent_id
        self.updated_at = utc_now()


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError({"name": ["Category name is required"]})
    if len(name) > 100:
        raise ValidationError({"name": ["Category name must be at most 100 characters"]})
    return name
