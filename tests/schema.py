"""Blog schema used by the export and adapter tests.

Built per test: collections are bound to the test's session and every build
starts from a fresh SchemaContext.
"""
from graphiform import SchemaContext, SQLAlchemyModel, declare_association, to_strawberry
from tests.models import Comment, Post, User


def declare_blog(context: SchemaContext, session):
    models = [SQLAlchemyModel(cls, session) for cls in (User, Post, Comment)]
    schemas = [context.model(m) for m in models]
    # columns of every model first: relations point at the targets' connections
    for model, schema in zip(models, schemas):
        model.declare_columns(schema)
    for model, schema in zip(models, schemas):
        model.declare_relationships(schema)
    blog = dict(zip(('user', 'post', 'comment'), schemas))
    declare_association(blog['user'], 'post_collection', blog['post'],
                        description="Posts of the user, filterable in the database.")
    return blog


def build_schema(session, context: SchemaContext = None):
    context = context or SchemaContext()
    blog = declare_blog(context, session)
    return to_strawberry(context, {
        'user': blog['user'].query_resolver(),
        'users': blog['user'].connection_query_resolver(),
        'post': blog['post'].query_resolver(),
        'posts': blog['post'].connection_query_resolver(),
        'comments': blog['comment'].connection_query_resolver(),
    })
