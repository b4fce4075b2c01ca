"""
Набор шаблонов, на котором проверяется построение деревьев и дайджестов.
"""

from __future__ import annotations

from vdigest.types import TemplateKind, TemplateSource

VIEWS = {
    # messages/show -> header, message, comments/comments -> comment -> reply
    "messages/show.html.erb": (
        '<%= render "header" %>\n'
        "<%= render @message %>\n"
        '<%= render "comments/comments" %>\n'
    ),
    "messages/_header.html.erb": "<h1>Messages</h1>\n",
    "messages/_message.html.erb": "THIS BE WHERE THEM MESSAGE GO, YO!\n",
    "messages/edit.html.erb": '<%= render "form" %>\n',
    "messages/_form.html.erb": '<%= render "messages/message" %>\n<%= render "messages/header" %>\n',
    "messages/broken.html.erb": '<%= render "messages/nowhere" %>\n<%= render "messages/header" %>\n',
    "messages/_message123.html.erb": "<%= render 'messages/message123' %>\n",
    "comments/_comments.html.erb": '<%= render partial: "comments/comment", collection: @comments %>\n',
    "comments/_comment.html.erb": '<p><%= comment.body %></p>\n<%= render "comments/reply" %>\n',
    "comments/_reply.html.erb": "Reply\n",
    # wildcard по хвостовой интерполяции
    "timeline/index.html.erb": (
        "<% @events.each do |event| %>\n"
        '  <%= render "events/#{event.kind}" %>\n'
        "<% end %>\n"
    ),
    "events/_completed.html.erb": "Completed\n",
    "events/_pending.html.erb": "Pending\n",
    # интерполяция, которую нельзя свести к wildcard
    "orders/show.html.erb": '<%= render "orders/#{variable || "default"}" %>\n',
    # рекурсия: шаблон рендерит одноимённый партиал, партиал — сам себя
    "level/recursion.html.erb": "<%= render 'level/recursion' %>\n",
    "level/_recursion.html.erb": "<%= render 'level/recursion' %>\n",
    # взаимная рекурсия партиалов
    "mutual/start.html.erb": "<%= render 'mutual/a' %>\n",
    "mutual/_a.html.erb": "A <%= render 'mutual/b' %>\n",
    "mutual/_b.html.erb": "B <%= render 'mutual/a' %>\n",
    # детали: локаль и вариант
    "welcome/index.html.erb": "Hello\n",
    "welcome/index.fr.html.erb": "Bonjour\n",
    "welcome/index.html+phone.erb": "Hi\n",
}


def make_template(name: str, source: str, kind: TemplateKind = TemplateKind.ERB) -> TemplateSource:
    """Шаблон вне хранилища — для юнит-тестов экстракторов."""
    return TemplateSource(
        virtual_path=name,
        identifier=f"test/{name}",
        source=source.encode("utf-8"),
        kind=kind,
        partial=name.rpartition("/")[2].startswith("_"),
    )
