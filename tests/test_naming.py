import pytest

from graphiform.naming import (
    NAMESPACE_SUFFIXES,
    camel_to_snake,
    demodulize,
    derived_name,
    enum_name,
    snake_to_camel,
)


@pytest.mark.parametrize("identity, expected", [
    ("Post", "Post"),
    ("blog.models.Post", "Post"),
    ("Blog::Post", "Post"),
    ("Admin::Blog::PostComment", "PostComment"),
])
def test_demodulize_strips_hierarchy(identity, expected):
    assert demodulize(identity) == expected


@pytest.mark.parametrize("namespace, expected", [
    ("types", "Post"),
    ("inputs", "PostInput"),
    ("filters", "PostFilter"),
    ("sorts", "PostSort"),
    ("edges", "PostEdge"),
    ("connections", "PostConnection"),
    ("resolvers", "PostResolver"),
    ("queries", "PostQuery"),
    ("connection_queries", "PostConnectionQuery"),
])
def test_derived_names(namespace, expected):
    assert derived_name(namespace, "Post") == expected


def test_every_namespace_has_a_suffix():
    assert set(NAMESPACE_SUFFIXES) == {
        'types', 'inputs', 'filters', 'sorts', 'edges', 'connections',
        'resolvers', 'queries', 'connection_queries',
    }


def test_enum_name_pluralizes_attribute():
    assert enum_name("Post", "status") == "PostStatuses"
    assert enum_name("Post", "category") == "PostCategories"
    assert enum_name("User", "access_level") == "UserAccess_levels"
    assert enum_name("Post", "order_status") == "PostOrder_statuses"
    assert enum_name("Post", "Status") == "PostStatuses"


def test_case_conversions():
    assert camel_to_snake("PostComment") == "post_comment"
    assert camel_to_snake("post_comment") == "post_comment"
    assert snake_to_camel("post_comments") == "postComments"
    assert snake_to_camel("post_comments", upper_first=True) == "PostComments"
    assert snake_to_camel("author", upper_first=True) == "Author"
