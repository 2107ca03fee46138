from homelinks.merge import (
    effective_items,
    effective_settings,
    merge_global_settings,
    reconcile_items,
    same_item,
    settings_overlay,
)
from homelinks.models import AppLink, Settings


def test_effective_items_without_overlay_equals_common(make_link) -> None:
    common = [make_link("grafana"), make_link("jenkins")]
    assert effective_items(common, []) == common


def test_user_copy_wins_and_keeps_position(make_link) -> None:
    common = [make_link("grafana"), make_link("jenkins"), make_link("wiki")]
    override = make_link("jenkins", favorite=True)
    private = make_link("notes")

    merged = effective_items(common, [private, override])

    assert [it.id for it in merged] == ["grafana", "jenkins", "wiki", "notes"]
    assert merged[1] is override
    assert len({it.id for it in merged}) == len(merged)


def test_same_item_ignores_key_order_and_null_fields() -> None:
    a = AppLink.model_validate({"id": "x", "name": "X", "url": "https://x", "tags": ["a"]})
    b = AppLink.model_validate(
        {"tags": ["a"], "url": "https://x", "gitUrl": None, "name": "X", "id": "x"}
    )
    assert same_item(a, b)


def test_same_item_treats_defaults_as_equal() -> None:
    a = AppLink.model_validate({"id": "x", "name": "X", "url": "https://x"})
    b = AppLink.model_validate({"id": "x", "name": "X", "url": "https://x", "pinned": False, "tags": []})
    assert same_item(a, b)


def test_reconcile_drops_unchanged_common_copies(make_link) -> None:
    common = [make_link("grafana"), make_link("jenkins")]
    submitted = [make_link("grafana"), make_link("jenkins")]
    assert reconcile_items(common, submitted) == []


def test_reconcile_keeps_modified_and_private_items(make_link) -> None:
    common = [make_link("grafana"), make_link("jenkins")]
    edited = make_link("jenkins", description="build server")
    private = make_link("notes")

    overlay = reconcile_items(common, [make_link("grafana"), edited, private])

    assert overlay == [edited, private]


def test_reconcile_keeps_unknown_fields_in_comparison(make_link) -> None:
    common = [make_link("grafana")]
    submitted = AppLink.model_validate(
        {"id": "grafana", "name": "Grafana", "url": "https://grafana.example.com", "team": "ops"}
    )
    assert reconcile_items(common, [submitted]) == [submitted]


def test_effective_settings_overlays_user_keys() -> None:
    base = Settings()
    merged = effective_settings(base, {"sortMode": "urgency", "colors": {"pin": "#000000"}})

    assert merged.sort_mode == "urgency"
    assert merged.site_title == base.site_title
    assert merged.colors.pin == "#000000"
    assert merged.colors.star == base.colors.star


def test_settings_overlay_keeps_only_differences() -> None:
    base = Settings()
    changes = {
        "siteTitle": base.site_title,
        "sortMode": "alpha_desc",
        "colors": {"star": base.colors.star, "pin": "#111111"},
    }

    assert settings_overlay(base, {}, changes) == {
        "sortMode": "alpha_desc",
        "colors": {"pin": "#111111"},
    }


def test_settings_overlay_reverting_to_global_removes_key() -> None:
    base = Settings()
    current = {"sortMode": "urgency", "healthIntervalSec": 60}

    overlay = settings_overlay(base, current, {"sortMode": base.sort_mode})

    assert overlay == {"healthIntervalSec": 60}


def test_merge_global_settings() -> None:
    merged = merge_global_settings(Settings(), {"siteTitle": "Ops", "colors": {"pinBg": "#eeeeee"}})
    assert merged.site_title == "Ops"
    assert merged.colors.pin_bg == "#eeeeee"
    assert merged.colors.pin == "#0ea5e9"
