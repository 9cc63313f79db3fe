"""BDD tests for rating aggregation and duplicate reviews."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.exceptions import DuplicateResourceError
from storefront.reviews import queries
from storefront.reviews.submission import SubmitReview

scenarios("features/product_ratings.feature")


def _rate(shopper, product, rating):
    command = SubmitReview(user_id=shopper.id, product_id=product.id, rating=rating, title="Pours well")
    return current_domain.process(command, asynchronous=False)


@given(parsers.cfparse("the shopper has rated the product {rating:d}"))
def shopper_has_rated(shopper, product, rating):
    _rate(shopper, product, rating)


@when(parsers.cfparse("the shopper rates the product {rating:d}"))
def shopper_rates(shopper, product, rating, error):
    try:
        _rate(shopper, product, rating)
    except DuplicateResourceError as exc:
        error["exc"] = exc


@then("the product has no average rating")
def no_average(product):
    assert queries.rating_summary(product.id).average is None


@then(parsers.cfparse("the average rating is {average:f}"))
def average_rating(product, average):
    assert queries.rating_summary(product.id).average == average


@then(parsers.re(r"the product has (?P<count>\d+) reviews?"))
def review_count(product, count):
    assert queries.count_for_product(product.id) == int(count)
    assert queries.rating_summary(product.id).count == int(count)


@then("the review is rejected as a duplicate")
def rejected_as_duplicate(error, shopper, product):
    assert isinstance(error["exc"], DuplicateResourceError)
    assert queries.has_reviewed(shopper.id, product.id)
