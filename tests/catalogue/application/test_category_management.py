"""Application tests for categories and their optional hierarchy."""

from uuid import uuid4

import pytest
from protean import current_domain

from storefront.catalogue.category_management import (
    CreateCategory,
    DeleteCategory,
    UpdateCategory,
    get_category,
    list_categories,
    list_children,
)
from storefront.catalogue.product_management import get_product
from storefront.exceptions import DuplicateResourceError, ObjectNotFoundError, ValidationError


class TestCreateCategory:
    def test_create(self):
        category = current_domain.process(
            CreateCategory(name="  Kitchen ", description="Pots and pans"), asynchronous=False
        )

        stored = get_category(category.id)
        assert stored.name == "Kitchen"
        assert stored.parent_id is None

    def test_duplicate_name(self, make_category):
        make_category(name="Garden")

        with pytest.raises(DuplicateResourceError):
            current_domain.process(CreateCategory(name="Garden"), asynchronous=False)

    def test_unknown_parent(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(CreateCategory(name="Orphan", parent_id=str(uuid4())), asynchronous=False)

        assert list_categories() == []


class TestHierarchy:
    def test_children(self, make_category):
        parent = make_category(name="Kitchen")
        child = make_category(name="Mugs", parent_id=parent.id)

        assert [category.id for category in list_children(parent.id)] == [child.id]

    def test_cycle_is_rejected(self, make_category):
        root = make_category(name="Home")
        child = make_category(name="Kitchen", parent_id=root.id)

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCategory(category_id=root.id, parent_id=child.id), asynchronous=False)

        assert get_category(root.id).parent_id is None

    def test_category_with_children_cannot_be_deleted(self, make_category):
        parent = make_category(name="Kitchen")
        make_category(name="Mugs", parent_id=parent.id)

        with pytest.raises(ValidationError):
            current_domain.process(DeleteCategory(category_id=parent.id), asynchronous=False)


class TestDeleteCategory:
    def test_products_are_detached(self, make_category, make_product):
        category = make_category()
        product = make_product(category_id=category.id)

        current_domain.process(DeleteCategory(category_id=category.id), asynchronous=False)

        view = get_product(product.id)
        assert view.product.category_id is None
        assert view.category_name is None

    def test_unknown(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteCategory(category_id=str(uuid4())), asynchronous=False)
