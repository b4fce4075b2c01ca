"""
Построение дерева зависимостей: вложенность, общие узлы, циклы и
отсутствующие шаблоны.
"""

import logging

from vdigest.extractors import create_extractor
from vdigest.tree import TreeBuilder
from vdigest.types import NodeState


def build(views, details, name, strategy="pattern"):
    return TreeBuilder(views, create_extractor(strategy)).build(name, details)


def test_nested_children(views, details, strategy):
    tree = build(views, details, "messages/show", strategy)
    assert tree.name == "messages/show"
    assert not tree.missing
    assert tree.children() == [
        ("messages/header", []),
        ("messages/message", []),
        ("comments/comments", [{"comments/comment": ["comments/reply"]}]),
    ]


def test_nested_dependencies(views, details, strategy):
    tree = build(views, details, "messages/show", strategy)
    assert tree.nested_dependencies() == [
        "messages/header",
        "messages/message",
        {"comments/comments": [{"comments/comment": ["comments/reply"]}]},
    ]


def test_partial_prefers_underscore_file(views, details):
    tree = build(views, details, "messages/show")
    header = tree.root.children[0]
    assert header.template.virtual_path == "messages/_header"
    assert header.template.partial


def test_wildcard_expands_to_namespace(views, details, strategy):
    tree = build(views, details, "timeline/index", strategy)
    assert tree.root.dependencies == ["events/completed", "events/pending"]


def test_unsupported_interpolation_gives_no_children(views, details, strategy):
    tree = build(views, details, "orders/show", strategy)
    assert tree.root.dependencies == []
    assert tree.root.state is NodeState.BUILT


class TestCycles:

    def test_self_rendering_partial(self, views, details):
        tree = build(views, details, "messages/message123")
        assert tree.root.template.partial
        assert tree.root.dependencies == ["messages/message123"]
        leaf = tree.root.children[0]
        assert leaf.state is NodeState.CYCLE_CLOSED
        assert leaf.ref is tree.root
        assert leaf.children == []

    def test_template_and_partial_with_same_name_are_distinct(self, views, details):
        tree = build(views, details, "level/recursion")
        partial = tree.root.children[0]
        assert tree.root.template.virtual_path == "level/recursion"
        assert partial.template.virtual_path == "level/_recursion"
        assert partial.state is NodeState.BUILT
        # партиал рендерит сам себя: цикл замыкается на нём, а не на корне
        assert partial.children[0].ref is partial
        assert tree.nested_dependencies() == [{"level/recursion": ["level/recursion"]}]

    def test_mutual_recursion_terminates(self, views, details, strategy):
        tree = build(views, details, "mutual/start", strategy)
        assert tree.nested_dependencies() == [{"mutual/a": [{"mutual/b": ["mutual/a"]}]}]
        closing = tree.root.children[0].children[0].children[0]
        assert closing.state is NodeState.CYCLE_CLOSED
        assert closing.ref is tree.root.children[0]


class TestMissing:

    def test_missing_root(self, views, details):
        tree = build(views, details, "nothing/there")
        assert tree.missing
        assert tree.root.children == []

    def test_missing_dependency_is_logged_and_kept_as_leaf(self, views, details, caplog):
        with caplog.at_level(logging.ERROR, logger="vdigest"):
            tree = build(views, details, "messages/broken")
        assert tree.root.dependencies == ["messages/nowhere", "messages/header"]
        assert tree.root.children[0].is_missing
        assert "Couldn't find template for digesting: messages/nowhere" in caplog.text

    def test_dynamic_name_is_not_reported(self, views, details, caplog):
        views.update("reports/index.html.erb", "<%# Template Dependency: reports/#dynamic %>")
        with caplog.at_level(logging.ERROR, logger="vdigest"):
            tree = build(views, details, "reports/index")
        assert tree.root.children[0].is_missing
        assert "Couldn't find" not in caplog.text


def test_shared_dependency_is_built_once(views, details):
    views.update("pages/index.html.erb", '<%= render "messages/edit" %><%= render "messages/show" %>')
    tree = build(views, details, "pages/index")
    edit, show = tree.root.children
    # messages/header встречается в обеих ветках, это один и тот же узел
    header_from_form = edit.children[0].children[1]
    header_from_show = show.children[0]
    assert header_from_form is header_from_show
