from types import SimpleNamespace

import pytest

from graphiform import SchemaContext, StrawberryExporter, to_strawberry
from graphiform.errors import ConfigurationError
from graphiform.export import encode_cursor
from graphiform.fields import declare_field
from tests.models import Post
from tests.schema import build_schema

from .fakes import FakeModel


@pytest.mark.asyncio
async def test_query_returns_first_match(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query {
      post(where: {title: {eq: "GraphQL Tips"}}) { id title status author { name } }
    }
    '''
    res = await schema.execute(q)
    assert res.errors is None, res.errors
    assert res.data['post'] == {
        'id': populated_db['posts'][2].id,
        'title': 'GraphQL Tips',
        'status': 'published',
        'author': {'name': 'Bob Smith'},
    }


@pytest.mark.asyncio
async def test_connection_edges_and_nodes(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query {
      posts { edges { cursor node { title } } nodes { id } }
    }
    '''
    res = await schema.execute(q)
    assert res.errors is None, res.errors
    edges = res.data['posts']['edges']
    assert [e['node']['title'] for e in edges] == ['First Post', 'Draft Notes', 'GraphQL Tips']
    assert [e['cursor'] for e in edges] == [encode_cursor(0), encode_cursor(1), encode_cursor(2)]
    assert len(res.data['posts']['nodes']) == 3


@pytest.mark.asyncio
async def test_connection_filter_enum_and_sort(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query {
      posts(where: {status: published}, sort: {id: desc}) { nodes { title status } }
    }
    '''
    res = await schema.execute(q)
    assert res.errors is None, res.errors
    assert res.data['posts']['nodes'] == [
        {'title': 'GraphQL Tips', 'status': 'published'},
        {'title': 'First Post', 'status': 'published'},
    ]


@pytest.mark.asyncio
async def test_or_filter(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query {
      posts(where: {title: {eq: "Draft Notes"}, OR: [{title: {startsWith: "GraphQL"}}]}, sort: {id: asc}) {
        nodes { title }
      }
    }
    '''
    res = await schema.execute(q)
    assert res.errors is None, res.errors
    assert [n['title'] for n in res.data['posts']['nodes']] == ['Draft Notes', 'GraphQL Tips']


@pytest.mark.asyncio
async def test_variables_and_in_operator(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query($ids: [Int!]) {
      posts(where: {id: {in: $ids}}) { nodes { id } }
    }
    '''
    ids = [populated_db['posts'][0].id, populated_db['posts'][2].id]
    res = await schema.execute(q, variable_values={'ids': ids})
    assert res.errors is None, res.errors
    assert [n['id'] for n in res.data['posts']['nodes']] == ids


@pytest.mark.asyncio
async def test_nested_relation_is_filtered(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query {
      user(where: {name: {eq: "Alice Johnson"}}) {
        name
        postCollection(where: {status: draft}) { nodes { title } }
        posts { nodes { title } }
      }
    }
    '''
    res = await schema.execute(q)
    assert res.errors is None, res.errors
    assert res.data['user']['postCollection']['nodes'] == [{'title': 'Draft Notes'}]
    # plain relationship lists have no filtering capability
    assert [n['title'] for n in res.data['user']['posts']['nodes']] == ['First Post', 'Draft Notes']


@pytest.mark.asyncio
async def test_nested_list_relation(db_session, populated_db):
    schema = build_schema(db_session)
    q = '''
    query {
      post(where: {title: {eq: "First Post"}}) {
        comments { edges { cursor node { body } } }
      }
    }
    '''
    res = await schema.execute(q)
    assert res.errors is None, res.errors
    edges = res.data['post']['comments']['edges']
    assert [e['node']['body'] for e in edges] == ['Nice!', 'Thanks']
    assert edges[0]['cursor'] == encode_cursor(0)


@pytest.mark.asyncio
async def test_missing_session_is_a_graphql_error(db_session, populated_db):
    schema = build_schema(None)
    res = await schema.execute('query { post { id } }')
    assert res.errors is not None
    assert 'No session bound' in '\n'.join(str(e) for e in res.errors)


def test_schema_shape(db_session):
    sdl = build_schema(db_session).as_str()
    assert 'enum PostStatuses' in sdl
    assert 'enum SortDirection' in sdl
    assert 'input PostFilter' in sdl
    assert 'OR: [PostFilter!]' in sdl
    assert 'input PostSort' in sdl
    assert 'type PostConnection' in sdl
    assert 'type PostEdge' in sdl
    assert 'PostInput' not in sdl
    assert '"""Blog posts"""' in sdl


def test_sort_argument_absent_without_sortable_fields():
    context = SchemaContext()
    tag = context.model(FakeModel('blog.Tag', [SimpleNamespace(label='x')]))
    declare_field(tag, 'label', str, sortable=False)
    sdl = to_strawberry(context, {'tags': tag.connection_query_resolver()}).as_str()
    tags_line = next(line for line in sdl.splitlines() if line.strip().startswith('tags('))
    assert 'where: TagFilter' in tags_line
    assert 'sort' not in tags_line
    assert 'TagSort' not in sdl


@pytest.mark.asyncio
async def test_in_memory_model_resolves():
    context = SchemaContext()
    tag = context.model(FakeModel('blog.Tag', [SimpleNamespace(label='x'), SimpleNamespace(label='y')]))
    declare_field(tag, 'label', str)
    schema = to_strawberry(context, {'tags': tag.connection_query_resolver()})
    res = await schema.execute('query { tags(sort: {label: desc}) { nodes { label } } }')
    assert res.errors is None, res.errors
    assert res.data['tags']['nodes'] == [{'label': 'y'}, {'label': 'x'}]


def test_type_without_fields_cannot_be_exported():
    context = SchemaContext()
    empty = context.model(FakeModel('blog.Empty'))
    with pytest.raises(ConfigurationError):
        StrawberryExporter(context).strawberry_type(empty.type())


def test_enum_without_values_cannot_be_exported():
    context = SchemaContext()
    post = context.model(FakeModel('blog.Post'))
    with pytest.raises(ConfigurationError):
        StrawberryExporter(context).strawberry_type(post.enum_resolver('status'))


def test_exporter_caches_classes():
    context = SchemaContext()
    model = context.model(Post)
    declare_field(model, 'title', str)
    exporter = StrawberryExporter(context)
    assert exporter.strawberry_type(model.filter()) is exporter.strawberry_type(model.filter())


def test_query_fields_are_required():
    with pytest.raises(ConfigurationError):
        to_strawberry(SchemaContext(), {})
