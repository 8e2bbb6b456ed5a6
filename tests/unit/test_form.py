"""Tests for input form glue."""

from datetime import date

import pytest

from recordkit.core.errors import CoercionError, SchemaError, ValidationError
from recordkit.managers.form import InputForm, display_value


@pytest.fixture
def blog(db):
    db.declare_columns(
        "Post",
        {
            "title": "string",
            "views": "integer",
            "published": "boolean",
            "published_on": "date",
            "tags": "array",
        },
    )
    db.declare_columns("Comment", {"body": "string"})
    db.declare_has_many("Post", "Comment")
    return db


class TestDisplayValue:
    """Test rendering typed values as field text."""

    def test_values(self):
        assert display_value(None) == ""
        assert display_value(True) == "true"
        assert display_value(False) == "false"
        assert display_value(date(2024, 5, 1)) == "2024-05-01"
        assert display_value(["a", "b"]) == "a, b"
        assert display_value(3) == "3"


class TestInputForm:
    """Test forms over records."""

    def test_fields_follow_column_order(self, blog):
        form = blog.form(blog.new("Post"))

        assert [f.name for f in form.fields] == [
            "title",
            "views",
            "published",
            "published_on",
            "tags",
        ]
        assert [f.label for f in form.fields] == [
            "Title",
            "Views",
            "Published",
            "Published on",
            "Tags",
        ]
        assert form.fields[1].type == "integer"

    def test_values_of_new_record(self, blog):
        form = blog.form(blog.new("Post"))
        assert form.values() == {
            "title": "",
            "views": "0",
            "published": "false",
            "published_on": "",
            "tags": "",
        }

    def test_foreign_keys_hidden_by_default(self, blog):
        comment = blog.new("Comment", body="x")

        assert [f.name for f in blog.form(comment).fields] == ["body"]

        form = blog.form(comment, include_foreign_keys=True)
        assert [f.name for f in form.fields] == ["body", "post_id"]
        assert form.fields[1].label == "Post"

    def test_apply_coerces_text(self, blog):
        post = blog.new("Post")
        InputForm(post).apply(
            {
                "title": "Hello",
                "views": "12",
                "published": "yes",
                "published_on": "2024-05-01",
                "tags": "news, intro,",
            }
        )

        assert post.title == "Hello"
        assert post.views == 12
        assert post.published is True
        assert post.published_on == date(2024, 5, 1)
        assert post.tags == ["news", "intro"]
        assert post.dirty

    def test_apply_is_all_or_nothing(self, blog):
        post = blog.new("Post", title="Before")
        with pytest.raises(CoercionError):
            blog.form(post).apply({"title": "After", "views": "many"})
        assert post.title == "Before"

    def test_apply_unknown_field(self, blog):
        post = blog.new("Post")
        with pytest.raises(SchemaError):
            blog.form(post).apply({"body": "x"})

    def test_apply_hidden_field(self, blog):
        comment = blog.new("Comment")
        with pytest.raises(SchemaError):
            blog.form(comment).apply({"post_id": "3"})

    def test_submit_saves(self, blog):
        post = blog.new("Post")
        saved = blog.form(post).submit({"title": "Saved", "views": "1"})

        assert saved is post
        assert post.persisted
        assert blog.find_by_id("Post", post.id).title == "Saved"

    def test_submit_runs_validations(self, blog):
        blog.validate("Post", "title", presence=True)
        post = blog.new("Post")

        with pytest.raises(ValidationError):
            blog.form(post).submit({"title": "  "})
        assert not post.persisted
        assert post.errors == {"title": ["can't be blank"]}

    def test_form_for_round_trip_values(self, blog):
        post = blog.create("Post", title="t", tags=["a", "b"], published_on="2024-01-02")
        form = blog.form(post)
        values = form.values()

        form.apply(values)
        assert post.tags == ["a", "b"]
        assert post.published_on == date(2024, 1, 2)
