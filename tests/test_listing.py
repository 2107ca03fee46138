from datetime import datetime

from homelinks.listing import NO_DEADLINE, all_tags, days_left, filter_items, sort_items, urgency

NOW = datetime(2026, 3, 10, 15, 30)


def test_days_left() -> None:
    assert days_left("2026-03-11", NOW) == 1
    assert days_left("2026-03-20", NOW) == 10
    assert days_left("2026-03-10", NOW) == 0
    assert days_left("2026-03-01", NOW) == -9
    assert days_left(None, NOW) is None
    assert days_left("next week", NOW) is None


def test_urgency_takes_the_nearest_deadline(make_link) -> None:
    item = make_link("vpn", cert_renewal_date="2026-04-10", token_expiry_date="2026-03-15")
    assert urgency(item, NOW) == 5
    assert urgency(make_link("wiki"), NOW) == NO_DEADLINE


def test_filter_by_query_tag_and_favorite(make_link) -> None:
    items = [
        make_link("grafana", description="Metrics dashboards", tags=["ops"]),
        make_link("jenkins", git_url="https://git.example.com/ci", favorite=True, tags=["ci"]),
        make_link("wiki", tags=["docs", "ops"]),
    ]

    assert [it.id for it in filter_items(items, q="METRICS")] == ["grafana"]
    assert [it.id for it in filter_items(items, q="git.example")] == ["jenkins"]
    assert [it.id for it in filter_items(items, q="docs")] == ["wiki"]
    assert [it.id for it in filter_items(items, tag="ops")] == ["grafana", "wiki"]
    assert [it.id for it in filter_items(items, favorite_only=True)] == ["jenkins"]
    assert filter_items(items, q="nothing") == []


def test_alpha_sorts_keep_pinned_first(make_link) -> None:
    items = [make_link("bravo"), make_link("alpha"), make_link("zulu", pinned=True), make_link("Charlie")]

    assert [it.id for it in sort_items(items, "alpha_asc")] == ["zulu", "alpha", "bravo", "Charlie"]
    assert [it.id for it in sort_items(items, "alpha_desc")] == ["zulu", "Charlie", "bravo", "alpha"]


def test_urgency_sort_direction(make_link) -> None:
    items = [
        make_link("later", token_expiry_date="2026-06-01"),
        make_link("none"),
        make_link("soon", cert_renewal_date="2026-03-12"),
    ]

    assert [it.id for it in sort_items(items, "urgency", now=NOW)] == ["soon", "later", "none"]
    assert [it.id for it in sort_items(items, "urgency", expired_first=False, now=NOW)] == [
        "none",
        "later",
        "soon",
    ]


def test_pinned_fav_urgency(make_link) -> None:
    items = [
        make_link("plain", cert_renewal_date="2026-03-11"),
        make_link("fav", favorite=True, cert_renewal_date="2026-05-01"),
        make_link("pin", pinned=True),
        make_link("fav-soon", favorite=True, cert_renewal_date="2026-03-20"),
    ]

    ordered = sort_items(items, "pinned_fav_urgency", now=NOW)
    assert [it.id for it in ordered] == ["pin", "fav-soon", "fav", "plain"]


def test_all_tags(make_link) -> None:
    items = [make_link("a", tags=["ops", "ci"]), make_link("b", tags=["docs", "ops"]), make_link("c")]
    assert all_tags(items) == ["ci", "docs", "ops"]


def test_names_compare_casefolded(make_link) -> None:
    items = [make_link("b", name="STRASSE B"), make_link("a", name="Straße A")]

    assert [it.id for it in sort_items(items, "alpha_asc")] == ["a", "b"]
    assert [it.id for it in filter_items(items, q="strasse a")] == ["a"]
