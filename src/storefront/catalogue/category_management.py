"""Category management: commands, handler and queries."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.domain import storefront
from storefront.exceptions import DuplicateResourceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    parent_id: Identifier()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def require_category(category_id, field: str = "category_id") -> Category:
    return current_domain.repository_for(Category).get(category_id, field=field)


@storefront.command_handler(part_of=Category)
class CategoryManagementHandler:
    @handle(CreateCategory)
    def create_category(self, command: CreateCategory) -> Category:
        repo = current_domain.repository_for(Category)
        category = Category.create(
            name=command.name,
            description=command.description,
            parent_id=command.parent_id,
        )
        if repo.name_taken(category.name):
            raise DuplicateResourceError({"name": [f"Category already exists: {category.name}"]})
        if category.parent_id is not None:
            require_category(category.parent_id, field="parent_id")
        repo.add(category)

        logger.info("category_created", category_id=category.id, name=category.name)
        return category

    @handle(UpdateCategory)
    def update_category(self, command: UpdateCategory) -> Category:
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None and repo.name_taken(command.name.strip(), exclude_id=category.id):
            raise DuplicateResourceError({"name": [f"Category already exists: {command.name.strip()}"]})
        category.update(name=command.name, description=command.description)

        if command.parent_id is not None and command.parent_id != category.parent_id:
            category.move_under(command.parent_id)
            require_category(command.parent_id, field="parent_id")
            if category.id in repo.ancestor_ids(command.parent_id):
                raise ValidationError({"parent_id": ["A category cannot be moved under its own subcategory"]})

        repo.add(category)

        logger.info("category_updated", category_id=category.id)
        return category

    @handle(DeleteCategory)
    def delete_category(self, command: DeleteCategory) -> None:
        """Products in the category are kept and become uncategorized."""
        repo = current_domain.repository_for(Category)
        repo.get(command.category_id)
        if repo.children_of(command.category_id):
            raise ValidationError({"category_id": ["Category has subcategories and cannot be deleted"]})
        repo.delete(command.category_id)

        logger.info("category_deleted", category_id=command.category_id)


# --- Queries ---


def get_category(category_id) -> Category:
    return require_category(category_id)


def list_categories() -> list[Category]:
    return current_domain.repository_for(Category).list_all()


def list_children(category_id) -> list[Category]:
    require_category(category_id)
    return current_domain.repository_for(Category).children_of(category_id)
