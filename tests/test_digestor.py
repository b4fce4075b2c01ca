"""
Свойства дайджеста: зависимость от всего дерева, от деталей и от
дополнительных токенов; поведение кэша.
"""

import itertools
import re

import pytest

from vdigest import DetailSignature, Digestor, InMemoryLookup
from vdigest.cache import DigestCache


def test_digest_is_hex_sha1(digestor, details):
    value = digestor.digest("messages/show", details)
    assert re.fullmatch(r"[0-9a-f]{40}", value)


def test_digest_is_stable(digestor, details):
    first = digestor.digest("messages/show", details)
    digestor.clear_cache()
    assert digestor.digest("messages/show", details) == first


def test_both_strategies_agree(views, details):
    pattern = Digestor(views, strategy="pattern").digest("messages/show", details)
    syntax = Digestor(views, strategy="syntax").digest("messages/show", details)
    assert pattern == syntax


def test_deep_change_changes_digest(views, digestor, details):
    before = digestor.digest("messages/show", details)
    views.update("comments/_reply.html.erb", "Reply, edited\n")
    digestor.clear_cache()
    assert digestor.digest("messages/show", details) != before


def test_unrelated_change_keeps_digest(views, digestor, details):
    before = digestor.digest("messages/show", details)
    views.update("events/_pending.html.erb", "Still pending\n")
    digestor.clear_cache()
    assert digestor.digest("messages/show", details) == before


def test_extra_dependencies_are_order_sensitive(digestor, details):
    combos = [(), ("a",), ("b",), ("a", "b"), ("b", "a")]
    digests = [digestor.digest("messages/show", details, extra) for extra in combos]
    for left, right in itertools.combinations(digests, 2):
        assert left != right


def test_extra_tokens_are_not_merged_by_separator(digestor, details):
    assert digestor.digest("messages/show", details, ["a-b"]) != digestor.digest("messages/show", details, ["a", "b"])


def test_wildcard_namespace_change_changes_digest(views, digestor, details):
    """Появление и исчезновение шаблона в пространстве имён wildcard меняет дайджест."""
    before = digestor.digest("timeline/index", details)

    views.update("events/_cancelled.html.erb", "Cancelled\n")
    digestor.clear_cache()
    added = digestor.digest("timeline/index", details)

    views.remove("events/_pending.html.erb")
    digestor.clear_cache()
    removed = digestor.digest("timeline/index", details)

    assert len({before, added, removed}) == 3
    assert digestor.dependencies("timeline/index", details) == ["events/cancelled", "events/completed"]


def test_layout_after_hash_in_literal_is_tracked(views, digestor, details):
    views.update("shared/card.html.erb", '<%= render "shared/badge", label: "No #1", layout: "shared/box" %>')
    views.update("shared/_badge.html.erb", "badge")
    views.update("shared/_box.html.erb", "box")
    before = digestor.digest("shared/card", details)

    views.update("shared/_box.html.erb", "box, restyled")
    digestor.clear_cache()
    assert digestor.digest("shared/card", details) != before


def test_missing_root_digest_is_empty(digestor, details):
    assert digestor.digest("nothing/there", details) == ""
    assert digestor.digest("nothing/there", details, ["v1"]) == ""


def test_missing_dependency_does_not_break_digest(views, digestor, details):
    before = digestor.digest("messages/broken", details)
    assert before
    views.update("messages/_nowhere.html.erb", "Found\n")
    digestor.clear_cache()
    assert digestor.digest("messages/broken", details) != before


class TestRecursion:

    @pytest.mark.parametrize("name", ["level/recursion", "messages/message123", "mutual/start"])
    def test_recursive_digest_is_repeatable(self, digestor, details, name):
        first = digestor.digest(name, details)
        assert first
        for _ in range(3):
            digestor.clear_cache()
            assert digestor.digest(name, details) == first

    def test_change_in_root_or_partial_is_seen(self, views, digestor, details):
        before = digestor.digest("level/recursion", details)

        views.update("level/recursion.html.erb", "<%= render 'level/recursion' %>\nroot\n")
        digestor.clear_cache()
        after_root = digestor.digest("level/recursion", details)
        assert after_root != before

        views.update("level/_recursion.html.erb", "<%= render 'level/recursion' %>\npartial\n")
        digestor.clear_cache()
        assert digestor.digest("level/recursion", details) not in (before, after_root)


class TestDetails:

    def test_locale_selects_template(self, digestor, details):
        en = digestor.digest("welcome/index", details)
        fr = digestor.digest("welcome/index", details.with_options(locale="fr"))
        assert en and fr and en != fr

    def test_variant_selects_template(self, digestor, details):
        plain = digestor.digest("welcome/index", details)
        phone = digestor.digest("welcome/index", details.with_options(variant="phone"))
        assert phone != plain

    def test_unknown_locale_falls_back_to_plain(self, digestor, details):
        plain = digestor.digest("welcome/index", details)
        assert digestor.digest("welcome/index", details.with_options(locale="de")) == plain


class TestCache:

    def test_stale_until_cleared(self, views, digestor, details):
        before = digestor.digest("messages/show", details)
        views.update("messages/_header.html.erb", "<h1>Changed</h1>\n")
        assert digestor.digest("messages/show", details) == before
        digestor.clear_cache()
        assert digestor.digest("messages/show", details) != before

    def test_disabled_cache_sees_changes(self, views, details):
        digestor = Digestor(views, cache=DigestCache(enabled=False))
        before = digestor.digest("messages/show", details)
        views.update("messages/_header.html.erb", "<h1>Changed</h1>\n")
        assert digestor.digest("messages/show", details) != before

    def test_tree_is_shared_between_digests(self, digestor, details):
        digestor.digest("messages/show", details, ["a"])
        digestor.digest("messages/show", details, ["b"])
        snapshot = digestor.cache.snapshot()
        assert snapshot.trees == 1
        assert snapshot.digests == 2


def test_dependency_reports(digestor, details):
    assert digestor.dependencies("messages/show", details) == [
        "messages/header",
        "messages/message",
        "comments/comments",
    ]
    assert digestor.nested_dependencies("comments/comments", details) == [
        {"comments/comment": ["comments/reply"]}
    ]
    assert digestor.dependencies("nothing/there", details) == []


def test_custom_content_digest(details):
    seen = []

    def fake(data: bytes) -> str:
        seen.append(data)
        return str(len(data))

    views = InMemoryLookup({"a/index.html.erb": "<%= render 'a/b' %>", "a/_b.html.erb": "bb"})
    digestor = Digestor(views, content_digest=fake)
    assert digestor.digest("a/index", DetailSignature())
    assert seen == [b"<%= render 'a/b' %>", b"bb"]
