import pytest

from inventra.services.query_engine import ItemFilter, ItemSort, QueryEngine


@pytest.fixture
def query(db, settings, inventory):
    return QueryEngine(db, settings)


def names(items):
    return [i.name for i in items]


def test_default_listing_excludes_inactive_and_sorts_by_name(query):
    items, meta = query.list()
    assert names(items) == ["Brush", "Hammer", "Primer", "Roller", "Wrench"]
    assert (meta.total, meta.page, meta.limit, meta.total_pages) == (5, 1, 20, 1)


@pytest.mark.parametrize(
    "status, expected",
    [
        ("low_stock", {"Wrench", "Roller"}),
        ("out_of_stock", {"Brush"}),
        ("in_stock", {"Hammer", "Primer"}),
        ("all", {"Brush", "Hammer", "Primer", "Roller", "Wrench"}),
        ("bogus", {"Brush", "Hammer", "Primer", "Roller", "Wrench"}),
    ],
)
def test_status_filter(query, status, expected):
    items, meta = query.list(ItemFilter(status=status))
    assert set(names(items)) == expected
    assert meta.total == len(expected)


def test_low_stock_never_includes_empty_or_healthy_items(query):
    items, _ = query.list(ItemFilter(status="low_stock"))
    assert all(0 < i.quantity <= i.min_quantity for i in items)


def test_include_inactive(query):
    items, meta = query.list(ItemFilter(status="low_stock", include_inactive=True))
    assert set(names(items)) == {"Wrench", "Roller", "Old Saw"}
    assert meta.total == 3


def test_category_filter_by_name_or_id(query, inventory):
    items, _ = query.list(ItemFilter(category="Tools"))
    assert names(items) == ["Hammer", "Wrench"]

    items, _ = query.list(ItemFilter(category=inventory["paint"]))
    assert names(items) == ["Brush", "Roller"]

    _, meta = query.list(ItemFilter(category="all"))
    assert meta.total == 5

    items, meta = query.list(ItemFilter(category="Nope"))
    assert items == [] and meta.total == 0


def test_search_is_case_insensitive_across_name_description_sku(query):
    assert names(query.list(ItemFilter(search="BRU"))[0]) == ["Brush"]
    assert names(query.list(ItemFilter(search="base COAT"))[0]) == ["Primer"]
    assert names(query.list(ItemFilter(search="ham-0"))[0]) == ["Hammer"]


def test_search_treats_wildcards_literally(query):
    items, meta = query.list(ItemFilter(search="%"))
    assert items == [] and meta.total == 0


def test_filters_combine(query):
    items, meta = query.list(ItemFilter(category="Tools", status="low_stock", search="wre"))
    assert names(items) == ["Wrench"]
    assert meta.total == 1


def test_sort_by_quantity_desc(query):
    items, _ = query.list(sort=ItemSort(field="quantity", order="DESC"))
    assert names(items) == ["Primer", "Hammer", "Wrench", "Roller", "Brush"]


def test_sort_by_category_name(query):
    items, _ = query.list(sort=ItemSort(field="category_name"))
    categorized = [i.category_name for i in items if i.category_name]
    assert categorized == ["Paint", "Paint", "Tools", "Tools"]


def test_invalid_sort_falls_back_to_name_asc(query):
    default, _ = query.list()
    odd, _ = query.list(sort=ItemSort(field="name; DROP TABLE items", order="sideways"))
    assert names(odd) == names(default)


def test_pagination(query):
    page1, meta = query.list(page=1, limit=2)
    assert names(page1) == ["Brush", "Hammer"]
    assert (meta.total, meta.total_pages) == (5, 3)

    page3, meta = query.list(page=3, limit=2)
    assert names(page3) == ["Wrench"]

    past_end, meta = query.list(page=4, limit=2)
    assert past_end == []
    assert meta.total == 5


def test_total_ignores_pagination(query):
    everything, _ = query.list(ItemFilter(status="in_stock"), limit=100)
    _, meta = query.list(ItemFilter(status="in_stock"), page=2, limit=1)
    assert meta.total == len(everything) == query.count(ItemFilter(status="in_stock"))
    assert meta.total_pages == 2


def test_page_and_limit_are_normalized(query, settings):
    _, meta = query.list(page=0, limit=0)
    assert (meta.page, meta.limit) == (1, settings.DEFAULT_PAGE_SIZE)

    _, meta = query.list(page=-3, limit=10_000)
    assert (meta.page, meta.limit) == (1, settings.MAX_PAGE_SIZE)


def test_pagination_meta_serializes_total_pages_alias(query):
    _, meta = query.list(limit=2)
    assert meta.model_dump(by_alias=True) == {"total": 5, "page": 1, "limit": 2, "totalPages": 3}


def test_empty_store(db):
    items, meta = QueryEngine(db).list()
    assert items == []
    assert (meta.total, meta.total_pages) == (0, 0)
