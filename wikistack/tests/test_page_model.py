"""
Unit tests for the WikiPage and User models: derived fields, the url_title
hook and validation errors.
"""

import pytest
from pydantic import ValidationError

from wikistack.models.page import TagSearch, WikiPage
from wikistack.models.user import User


@pytest.fixture
def new_page():
    return WikiPage(title="YDKJS", content="This is the beginning of the End")


def test_route_prepends_wiki(new_page):
    assert new_page.route == "/wiki/YDKJS"


def test_rendered_content_converts_markdown_to_html(new_page):
    assert new_page.rendered_content == "<p>This is the beginning of the End</p>"


def test_rendered_content_depends_only_on_content():
    a = WikiPage(title="First", content="# Heading\n\n*same*", tags="x")
    b = WikiPage(title="Second", content="# Heading\n\n*same*", status="closed")
    assert a.rendered_content == b.rendered_content
    assert "<em>same</em>" in a.rendered_content


def test_url_title_is_derived_from_title_before_validation():
    page = WikiPage(title="Cracking the Code", content="Will the code crack you?")
    assert page.url_title == "Cracking_the_Code"


def test_url_title_hook_overrides_supplied_value():
    page = WikiPage(title="YDKJS", url_title="reallyYouDoNot", content="text")
    assert page.url_title == "YDKJS"
    assert page.route == "/wiki/YDKJS"


def test_url_title_drops_punctuation():
    page = WikiPage(title="  What's   new, Python?  ", content="text")
    assert page.url_title == "Whats_new_Python"


def test_errors_without_title():
    with pytest.raises(ValidationError) as exc_info:
        WikiPage(content="This is the beginning of the End")
    assert exc_info.value.errors()[0]["loc"] == ("title",)


def test_errors_with_blank_title():
    with pytest.raises(ValidationError) as exc_info:
        WikiPage(title="   ", content="text")
    assert exc_info.value.errors()[0]["loc"] == ("title",)


def test_errors_without_content():
    with pytest.raises(ValidationError) as exc_info:
        WikiPage(title="YDKJS")
    assert exc_info.value.errors()[0]["loc"] == ("content",)


def test_errors_given_an_invalid_status():
    with pytest.raises(ValidationError) as exc_info:
        WikiPage(title="YDKJS", content="text", status="fail")
    assert exc_info.value.errors()[0]["loc"] == ("status",)


def test_status_defaults_to_open_and_accepts_closed():
    assert WikiPage(title="A", content="b").status == "open"
    assert WikiPage(title="A", content="b", status="").status == "open"
    assert WikiPage(title="A", content="b", status="Closed").status == "closed"


def test_tags_are_split_from_comma_separated_text():
    page = WikiPage(title="YDKJS", content="text", tags="JS, Closure, Infinite Loop, JS,")
    assert page.tags == ["JS", "Closure", "Infinite Loop"]


def test_tags_accept_a_list():
    page = WikiPage(title="YDKJS", content="text", tags=[" AI ", "", "ML"])
    assert page.tags == ["AI", "ML"]


def test_document_round_trip_keeps_identity():
    page = WikiPage(title="AI revolution", content="Who will rule who?", tags="AI")
    page.id = "abc"
    doc = page.to_document()
    assert doc["_id"] == "abc"
    assert "id" not in doc

    restored = WikiPage.from_document(doc)
    assert restored.id == "abc"
    assert restored.url_title == "AI_revolution"
    assert restored.tags == ["AI"]


def test_tag_search_rejects_blank_tag():
    assert TagSearch(tag=" JS ").tag == "JS"
    with pytest.raises(ValidationError):
        TagSearch(tag="  ")


def test_user_normalizes_email():
    user = User(name=" Kate ", email=" JS@Gmail.com ")
    assert user.name == "Kate"
    assert user.email == "js@gmail.com"


def test_user_rejects_invalid_email():
    with pytest.raises(ValidationError) as exc_info:
        User(name="Kate", email="not-an-email")
    assert exc_info.value.errors()[0]["loc"] == ("email",)


def test_user_route_uses_id():
    user = User(id="42", name="Kate", email="js@gmail.com")
    assert user.route == "/users/42"
