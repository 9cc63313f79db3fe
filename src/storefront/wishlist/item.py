from protean.fields import DateTime, Identifier

from storefront.domain import storefront
from storefront.shared.clock import utc_now


@storefront.aggregate
class WishlistItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    created_at = DateTime(default=utc_now)
    updated_at = DateTime(default=utc_now)

    @classmethod
    def save_for_later(cls, user_id, product_id):
        now = utc_now()
        return cls(user_id=user_id, product_id=product_id, created_at=now, updated_at=now)

    @property
    def added_at(self):
        return self.created_at
