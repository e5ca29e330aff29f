"""Tests for stylesheet class scanning (pwaforge.graph.selectors)."""

from __future__ import annotations

import pytest

from pwaforge.graph import scan_selectors, selector_rule


@pytest.mark.unit
def test_plain_and_grouped_rules():
    css = ".card, .card-title:hover {\n  color: red;\n}\n"
    assert scan_selectors(css) == {"card", "card-title"}


@pytest.mark.unit
def test_compound_and_descendant_selectors():
    css = "nav.navigation .nav-menu > .nav-item a.nav-link {\n  padding: 0.5rem;\n}\n"
    assert scan_selectors(css) == {"navigation", "nav-menu", "nav-item", "nav-link"}


@pytest.mark.unit
def test_rules_inside_media_queries():
    css = (
        "@media (max-width: 768px) {\n"
        "  .hero {\n    padding: 1.5rem;\n  }\n"
        "  .hero-title { font-size: 1.75rem; }\n"
        "}\n"
    )
    assert scan_selectors(css) == {"hero", "hero-title"}


@pytest.mark.unit
def test_comments_and_strings_are_ignored():
    css = (
        "/* .commented-out { } */\n"
        ".quote::before {\n  content: '.not-a-class {';\n}\n"
    )
    assert scan_selectors(css) == {"quote"}


@pytest.mark.unit
def test_declaration_values_are_not_selectors():
    css = ".box {\n  margin: 0.25rem;\n  transition: all 0.3s ease;\n}\n"
    assert scan_selectors(css) == {"box"}


@pytest.mark.unit
def test_empty_stylesheet():
    assert scan_selectors("") == frozenset()


@pytest.mark.unit
def test_selector_rule_is_scannable():
    rule = selector_rule("stub-notice")
    assert rule.startswith(".stub-notice {")
    assert scan_selectors(rule) == {"stub-notice"}
