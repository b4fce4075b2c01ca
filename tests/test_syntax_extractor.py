"""
Особенности стратегии по синтаксическому дереву.
"""

import logging

from vdigest.extractors import SyntaxTreeExtractor
from vdigest.extractors.ts_support import ErbDocument
from vdigest.types import TemplateKind

from tests.infrastructure.views import make_template


def test_malformed_code_is_skipped_with_warning(caplog):
    template = make_template("messages/broken", '<%= render "messages/header" %>\n<% end end ) %>')
    with caplog.at_level(logging.WARNING, logger="vdigest"):
        assert SyntaxTreeExtractor().extract(template) == []
    assert "Cannot parse test/messages/broken" in caplog.text
    assert "dependencies ignored" in caplog.text


def test_malformed_code_keeps_declared_dependencies():
    source = "<%# Template Dependency: messages/summary %>\n<% if ( %>"
    result = SyntaxTreeExtractor().extract(make_template("messages/index", source))
    assert [(d.name, d.declared) for d in result] == [("messages/summary", True)]


def test_malformed_ruby_template():
    template = make_template("feed/index", "render partial: (", TemplateKind.RUBY)
    assert SyntaxTreeExtractor().extract(template) == []


def test_render_inside_string_is_not_a_call():
    source = '<%= "render \'messages/secret\'" %>'
    assert SyntaxTreeExtractor().extract(make_template("messages/show", source)) == []


def test_receiver_call_is_still_render():
    source = '<%= view.render partial: "messages/card" %>'
    names = [d.name for d in SyntaxTreeExtractor().extract(make_template("messages/show", source))]
    assert names == ["messages/card"]


def test_erb_document_code_fragments():
    doc = ErbDocument('<h1><%= title %></h1>\n<%# note %>\n<% if ok %>x<% end %>')
    fragments = [f.strip() for f in doc.code_fragments()]
    assert fragments == ["title", "if ok", "end"]
    assert "note" not in doc.ruby_program()
