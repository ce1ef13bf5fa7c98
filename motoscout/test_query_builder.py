"""
Tests for search URL construction.
"""
from motoscout.models import SearchFilters, Source
from motoscout.query_builder import (
    AUTOSCOUT24_BASE_URL,
    SUBITO_BASE_URL,
    build_search_urls,
    format_number,
)


def test_honda_price_range_example():
    targets = build_search_urls(SearchFilters.from_dict({"marca": "Honda", "prezzoMin": 1000, "prezzoMax": 5000}))

    assert "make=Honda&pricefrom=1000&priceto=5000" in targets[0].url
    assert "ps=1000&pe=5000&q=Honda" in targets[1].url
    assert targets[0].url == f"{AUTOSCOUT24_BASE_URL}?make=Honda&pricefrom=1000&priceto=5000"
    assert targets[1].url == f"{SUBITO_BASE_URL}?ps=1000&pe=5000&q=Honda"


def test_two_targets_in_fixed_order():
    for filters in (SearchFilters(), SearchFilters(brand="Ducati"), SearchFilters(region="Lazio", max_mileage=20000)):
        targets = build_search_urls(filters)
        assert [t.source for t in targets] == [Source.AUTOSCOUT24, Source.SUBITO]


def test_empty_filters_give_bare_urls():
    targets = build_search_urls(SearchFilters())
    assert targets[0].url == AUTOSCOUT24_BASE_URL
    assert targets[1].url == SUBITO_BASE_URL
    assert all("?" not in t.url for t in targets)
    assert build_search_urls() == targets


def test_builder_is_deterministic():
    filters = SearchFilters(brand="BMW", model="R 1250 GS", min_price=8000, max_year=2022)
    assert build_search_urls(filters) == build_search_urls(filters)


def test_unsupported_filters_are_ignored():
    targets = build_search_urls(SearchFilters(max_mileage=15000, region="Lombardia"))
    for t in targets:
        assert "15000" not in t.url
        assert "Lombardia" not in t.url
        assert "?" not in t.url


def test_autoscout24_all_parameters():
    filters = SearchFilters(brand="Yamaha", model="MT-07", min_price=3000, max_price=7000, min_year=2015, max_year=2020)
    url = build_search_urls(filters)[0].url
    assert url == (
        f"{AUTOSCOUT24_BASE_URL}?make=Yamaha&model=MT-07"
        "&pricefrom=3000&priceto=7000&fregfrom=2015&fregto=2020"
    )


def test_subito_ignores_years_and_model_alone():
    url = build_search_urls(SearchFilters(model="Monster", min_year=2010, max_year=2020))[1].url
    assert url == SUBITO_BASE_URL


def test_subito_query_joins_brand_and_model():
    url = build_search_urls(SearchFilters(brand="Moto Guzzi", model="V7"))[1].url
    assert url == f"{SUBITO_BASE_URL}?q=Moto+Guzzi+V7"


def test_zero_price_counts_as_absent():
    targets = build_search_urls(SearchFilters(min_price=0, max_price=4000))
    assert "pricefrom" not in targets[0].url
    assert "ps=" not in targets[1].url
    assert "priceto=4000" in targets[0].url


def test_format_number():
    assert format_number(1500.0) == "1500"
    assert format_number(1500.5) == "1500.5"
    assert format_number(12000) == "12000"
