import asyncio
import random
from types import SimpleNamespace

import pytest

from jaops import (
    AccessDenied,
    Application,
    Operation,
    OperationKind,
    OperationParams,
    OperationProcessor,
    OperationRef,
    jsonapi_attr,
)
from jaops.processor import is_jsonapi_attr, pick
from dummy import Article, User, UserProcessor, resource_ids


def _op(kind=OperationKind.GET, type="user", id=None, **params) -> Operation:
    return Operation(op=kind, ref=OperationRef(type=type, id=id), params=OperationParams(**params))


def test_should_handle_defaults_to_false() -> None:
    assert OperationProcessor.should_handle("user") is False
    assert UserProcessor.should_handle("user") is True
    assert UserProcessor.should_handle("article") is False


def test_decorated_methods_are_collected() -> None:
    assert set(UserProcessor.attributes) == {"coolFactor", "friends"}
    assert set(UserProcessor.relationships) == {"articles"}
    assert is_jsonapi_attr(UserProcessor.cool_factor)
    assert OperationProcessor.attributes == {}


def test_attribute_maps_are_inherited() -> None:
    class AdminProcessor(UserProcessor):
        attributes = {"admin": lambda self, record: True}

    assert set(AdminProcessor.attributes) == {"coolFactor", "friends", "admin"}
    assert set(UserProcessor.attributes) == {"coolFactor", "friends"}


def test_pick() -> None:
    assert pick({"a": 1, "b": 2}, ["a", "c"]) == {"a": 1}
    assert pick(SimpleNamespace(a=1, b=2), ["b", "c"]) == {"b": 2}


@pytest.mark.asyncio
async def test_declared_and_computed_attributes(app: Application) -> None:
    processor = app.processor_for("user")
    user = await processor.execute(_op(id="42"))

    assert isinstance(user, User)
    assert user.id == "42"
    assert user.attributes == {
        "email": "x@y.com",
        "name": "Xavier",
        "coolFactor": 3,
        "friends": [{"name": "Joel"}, {"name": "Ryan"}],
    }
    # undeclared record keys are dropped
    assert "password" not in user.attributes
    assert user.relationships == {}


@pytest.mark.asyncio
async def test_sparse_fieldset(app: Application) -> None:
    processor = app.processor_for("user")
    user = await processor.execute(_op(id="42", fields={"user": ["email", "coolFactor", "password"]}))
    assert user.attributes == {"email": "x@y.com", "coolFactor": 3, "password": "hunter2"}

    user = await processor.execute(_op(id="42", fields={"user": ["email"]}))
    assert user.attributes == {"email": "x@y.com"}

    user = await processor.execute(_op(id="42", fields={"user": []}))
    assert user.attributes == {}


@pytest.mark.asyncio
async def test_fieldset_of_other_type_is_ignored(app: Application) -> None:
    processor = app.processor_for("user")
    user = await processor.execute(_op(id="42", fields={"article": ["title"]}))
    assert set(user.attributes) == {"email", "name", "coolFactor", "friends"}


@pytest.mark.asyncio
async def test_missing_declared_attributes_are_absent(app: Application, store) -> None:
    store["users"]["42"] = {"id": "42", "email": "x@y.com"}
    user = await app.processor_for("user").execute(_op(id="42", fields={"user": ["email", "name"]}))
    assert user.attributes == {"email": "x@y.com"}


@pytest.mark.asyncio
async def test_computed_attributes_win(app: Application) -> None:
    class ShadowProcessor(UserProcessor):
        attributes = {"email": lambda self, record: record["email"].upper()}

    processor = ShadowProcessor(app, User)
    user = await processor.execute(_op(id="42", fields={"user": ["email"]}))
    assert user.attributes == {"email": "X@Y.COM"}


@pytest.mark.asyncio
async def test_include_relationships(app: Application) -> None:
    processor = app.processor_for("user")
    user = await processor.execute(_op(id="42", fields={"user": ["email"]}, include=["articles", "unknown"]))

    assert list(user.relationships) == ["articles"]
    articles = user.relationships["articles"]
    assert [article.to_dict() for article in articles] == [
        {"id": "7", "type": "article", "attributes": {"title": "Hello", "body": "World"}, "relationships": {}}
    ]
    assert isinstance(articles[0], Article)


@pytest.mark.asyncio
async def test_include_honors_fieldset_of_related_type(app: Application) -> None:
    processor = app.processor_for("user")
    user = await processor.execute(_op(id="42", fields={"article": ["title"]}, include=["articles"]))
    assert user.relationships["articles"][0].attributes == {"title": "Hello"}


@pytest.mark.asyncio
async def test_include_to_one_relationship(app: Application) -> None:
    processor = app.processor_for("article")
    article = await processor.execute(_op(type="article", id="8", include=["author"]))
    author = article.relationships["author"]
    assert isinstance(author, User)
    assert author.id == "1"
    assert author.attributes == {"email": "a@b.com", "name": "Alice"}


@pytest.mark.asyncio
async def test_include_without_resolver_is_empty(app: Application) -> None:
    processor = app.processor_for("user")
    user = await processor.execute(_op(id="42", include=["manager", "articles"]))
    assert user.relationships["manager"] is None

    class NoResolverProcessor(OperationProcessor):
        async def get(self, op):
            return {"id": "1"}

    user = await NoResolverProcessor(app, User).execute(_op(id="1", include=["articles"]))
    assert user.relationships == {"articles": []}


@pytest.mark.asyncio
async def test_sequences_keep_their_order() -> None:
    class SlowProcessor(OperationProcessor):
        async def get(self, op):
            return [{"id": str(i), "email": f"{i}@b.com"} for i in range(20)]

        @jsonapi_attr
        async def delay(self, record):
            await asyncio.sleep(random.random() / 100)
            return int(record["id"])

    app = Application(resources=[User])
    users = await SlowProcessor(app, User).execute(_op())

    assert resource_ids(users) == [str(i) for i in range(20)]
    assert [user.attributes["delay"] for user in users] == list(range(20))


@pytest.mark.asyncio
async def test_projections_run_concurrently(app: Application) -> None:
    started = []
    release = asyncio.Event()

    class BlockingProcessor(OperationProcessor):
        async def get(self, op):
            return {"id": "1", "email": "a@b.com"}

        @jsonapi_attr
        async def first(self, record):
            started.append("first")
            await release.wait()
            return 1

        @jsonapi_attr
        async def second(self, record):
            started.append("second")
            release.set()
            return 2

    user = await asyncio.wait_for(BlockingProcessor(app, User).execute(_op(id="1")), timeout=1)
    assert sorted(started) == ["first", "second"]
    assert user.attributes == {"email": "a@b.com", "first": 1, "second": 2}


@pytest.mark.asyncio
async def test_object_records(app: Application) -> None:
    class ObjectProcessor(OperationProcessor):
        async def get(self, op):
            return SimpleNamespace(id=5, email="o@b.com", secret="x")

    user = await ObjectProcessor(app, User).execute(_op(id="5"))
    assert user.id == "5"
    assert user.attributes == {"email": "o@b.com"}


@pytest.mark.asyncio
async def test_missing_hook_returns_none(app: Application) -> None:
    processor = app.processor_for("article")
    assert await processor.execute(_op(OperationKind.IDENTIFY, type="article", id="7")) is None
    assert await processor.execute(_op(None, type="article")) is None


@pytest.mark.asyncio
async def test_default_hooks(app: Application) -> None:
    processor = OperationProcessor(app, User)
    assert await processor.execute(_op()) == []
    for kind in (OperationKind.ADD, OperationKind.UPDATE, OperationKind.REMOVE):
        with pytest.raises(AccessDenied):
            await processor.execute(_op(kind, id="1"))


@pytest.mark.asyncio
async def test_remove_returns_nothing(app: Application, store) -> None:
    processor = app.processor_for("user")
    assert await processor.execute(_op(OperationKind.REMOVE, id="1")) is None
    assert "1" not in store["users"]


@pytest.mark.asyncio
async def test_registry_lookups(app: Application) -> None:
    processor = app.processor_for("user")
    assert await processor.resource_for("article") is Article
    assert isinstance(await processor.processor_for("article"), OperationProcessor)
    assert await processor.processor_for("comment") is None
