# tests/unit/client/test_fetch_lifecycle.py
"""Tests for the fetch lifecycle: requests issued, in-place updates, failure flags."""

from __future__ import annotations

import asyncio

import pytest

from modelize import types
from modelize.contracts.enums import HttpMethod
from modelize.contracts.errors import ConfigurationError, CredentialsError, TransportError
from modelize.contracts.events import FetchFailed
from modelize.engine import Modelize
from modelize.testing import StubTransport, make_engine
from tests.fixtures.blog import Blog, define_blog


@pytest.fixture
def failures(engine: Modelize) -> list[FetchFailed]:
    received: list[FetchFailed] = []
    engine.on_fetch_failure(received.append)
    return received


# =============================================================================
# Entity reads
# =============================================================================


class TestEntityGet:
    @pytest.mark.asyncio
    async def test_get_mutates_in_place(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1", "name": "Ada"})
        author = blog.author.build()

        returned = await author.get("a1")

        assert returned is author
        assert author.name == "Ada"
        assert not author.is_new
        assert author.fetch_success
        assert author.fetch_success_once
        assert not author.fetch_in_progress
        request = transport.last_request
        assert request.method is HttpMethod.GET
        assert request.url == "https://api.test/v1/authors/a1"
        assert request.body is None

    @pytest.mark.asyncio
    async def test_get_with_action(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1"})
        await blog.author.build().get("a1", action="stats")
        assert transport.last_request.url == "https://api.test/v1/authors/a1/stats"

    @pytest.mark.asyncio
    async def test_in_progress_while_waiting(self, blog: Blog, transport: StubTransport) -> None:
        gate = asyncio.Event()
        seen: list[bool] = []
        author = blog.author.build()

        async def send(request):  # type: ignore[no-untyped-def]
            seen.append(author.fetch_in_progress)
            await gate.wait()
            return await StubTransport().respond({"id": "a1"}).send(request)

        transport.send = send  # type: ignore[method-assign]
        task = asyncio.create_task(author.get("a1"))
        await asyncio.sleep(0)
        assert author.fetch_in_progress
        gate.set()
        await task

        assert seen == [True]
        assert not author.fetch_in_progress
        assert author.fetch_success

    @pytest.mark.asyncio
    async def test_last_request_recorded_on_success(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1"})
        author = await blog.author.build().get("a1")
        assert author.last_request is not None
        assert author.last_request.primary_key == "a1"


# =============================================================================
# Entity writes
# =============================================================================


class TestEntitySave:
    @pytest.mark.asyncio
    async def test_save_new_posts_validated_fields(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1", "name": "Ada", "email": ""})
        author = blog.author.build({"id": "a1", "name": "Ada", "email": "bad"})
        author.valid(["name", "email"])

        await author.save()

        request = transport.last_request
        assert request.method is HttpMethod.POST
        assert request.url == "https://api.test/v1/authors"
        assert request.body == {"id": "a1", "name": "Ada"}
        assert author.save_success
        assert not author.is_new
        assert not author.fetch_success_once

    @pytest.mark.asyncio
    async def test_save_existing_puts_to_own_key(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1", "name": "Ada"})
        author = blog.author.from_wire({"id": "a1", "name": "Ada"})
        await author.save()
        assert transport.last_request.method is HttpMethod.PUT
        assert transport.last_request.url == "https://api.test/v1/authors/a1"

    @pytest.mark.asyncio
    async def test_patch_with_explicit_key(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a2"})
        await blog.author.build({"id": "a1"}).patch("a2")
        assert transport.last_request.method is HttpMethod.PATCH
        assert transport.last_request.url == "https://api.test/v1/authors/a2"

    @pytest.mark.asyncio
    async def test_post_with_action(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1"})
        await blog.author.build({"id": "a1"}).post(action="invite")
        assert transport.last_request.url == "https://api.test/v1/authors/invite"

    @pytest.mark.asyncio
    async def test_empty_response_keeps_record(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond(None, status=204)
        author = blog.author.from_wire({"id": "a1", "name": "Ada"})
        await author.put()
        assert author.save_success
        assert author.name == "Ada"

    @pytest.mark.asyncio
    async def test_headers_carry_json_content_type(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1"})
        await blog.author.build({"id": "a1"}).post()
        assert transport.last_request.headers["Content-Type"] == "application/json"


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    @pytest.mark.asyncio
    async def test_non_success_status(self, blog: Blog, transport: StubTransport, failures: list[FetchFailed]) -> None:
        transport.respond({"detail": "nope"}, status=404)
        author = blog.author.build({"name": "Ada"})

        returned = await author.get("a1")

        assert returned is author
        assert author.fetch_failure
        assert not author.fetch_in_progress
        assert not author.fetch_success
        assert author.name == "Ada"
        assert len(failures) == 1
        assert failures[0].status == 404
        assert failures[0].method is HttpMethod.GET
        assert failures[0].url == "https://api.test/v1/authors/a1"
        assert failures[0].response is not None

    @pytest.mark.asyncio
    async def test_transport_error(self, blog: Blog, transport: StubTransport, failures: list[FetchFailed]) -> None:
        transport.fail(TransportError("connection reset"))
        author = blog.author.build({"id": "a1"})
        await author.save()

        assert author.save_failure
        assert not author.save_in_progress
        assert author.is_new
        assert failures[0].reason == "connection reset"
        assert failures[0].status is None
        assert isinstance(failures[0].error, TransportError)

    @pytest.mark.asyncio
    async def test_foreign_transport_exception(
        self, blog: Blog, transport: StubTransport, failures: list[FetchFailed]
    ) -> None:
        error = ConnectionResetError("peer reset")
        transport.fail(error)
        author = await blog.author.build().get("a1")

        assert author.fetch_failure
        assert not author.fetch_in_progress
        assert failures[0].reason == "ConnectionResetError: peer reset"
        assert failures[0].error is error
        assert failures[0].status is None

    @pytest.mark.asyncio
    async def test_response_body_error(self) -> None:
        class BrokenBody:
            ok = True
            status = 200

            async def json(self) -> object:
                raise ValueError("truncated body")

        class BrokenTransport:
            async def send(self, request: object) -> BrokenBody:
                return BrokenBody()

        engine = make_engine(transport=BrokenTransport())
        failures: list[FetchFailed] = []
        engine.on_fetch_failure(failures.append)
        author = await define_blog(engine).author.build().get("a1")

        assert author.fetch_failure
        assert not author.fetch_in_progress
        assert failures[0].reason == "ValueError: truncated body"

    @pytest.mark.asyncio
    async def test_shape_mismatch(self, blog: Blog, transport: StubTransport, failures: list[FetchFailed]) -> None:
        transport.respond([{"id": "a1"}])
        author = await blog.author.build().get("a1")
        assert author.fetch_failure
        assert "Expected a authors object" in failures[0].reason

    @pytest.mark.asyncio
    async def test_malformed_nested_payload(self, blog: Blog, transport: StubTransport, failures: list[FetchFailed]) -> None:
        transport.respond({"id": "p1", "author": "a1"})
        post = await blog.post.build().get("p1")
        assert post.fetch_failure
        assert "Malformed posts payload" in failures[0].reason

    @pytest.mark.asyncio
    async def test_failure_keeps_success_once(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "a1"}).respond(status=500)
        author = blog.author.build()
        await author.get("a1")
        await author.get("a1")
        assert author.fetch_failure
        assert author.fetch_success_once

    @pytest.mark.asyncio
    async def test_failure_leaves_last_request(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond(status=500)
        author = await blog.author.build().get("a1")
        assert author.last_request is None

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        transport = StubTransport().hang()
        engine = make_engine(transport=transport, request_timeout_seconds=0.05)
        received: list[FetchFailed] = []
        engine.on_fetch_failure(received.append)
        blog = define_blog(engine)

        author = await blog.author.build().get("a1")

        assert author.fetch_failure
        assert not author.fetch_in_progress
        assert received[0].reason == "Timed out after 0.05s"

    @pytest.mark.asyncio
    async def test_external_cancellation_propagates(self) -> None:
        transport = StubTransport().hang()
        blog = define_blog(make_engine(transport=transport))
        author = blog.author.build()

        task = asyncio.create_task(author.get("a1"))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert author.fetch_failure
        assert not author.fetch_in_progress


class TestRaisedErrors:
    """Configuration and credential problems are raised, not flagged."""

    @pytest.mark.asyncio
    async def test_model_without_endpoint(self, engine: Modelize) -> None:
        local = engine.define("drafts", {"id": {"type": types.IDENTIFIER, "primary_key": True}})
        record = local.build()
        with pytest.raises(ConfigurationError, match="has no endpoint"):
            await record.get("x")
        assert not record.fetch_in_progress

    @pytest.mark.asyncio
    async def test_missing_token_raises_before_state_change(self) -> None:
        transport = StubTransport()
        blog = define_blog(make_engine(transport=transport, auth_token=lambda: None, require_auth=True))
        author = blog.author.build()

        with pytest.raises(CredentialsError):
            await author.get("a1")
        assert not author.fetch_in_progress
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_token_sent_as_bearer(self) -> None:
        transport = StubTransport().respond({"id": "a1"})
        blog = define_blog(make_engine(transport=transport, auth_token=lambda: "tok", require_auth=True))
        await blog.author.build().get("a1")
        assert transport.last_request.headers["Authorization"] == "Bearer tok"


# =============================================================================
# Collections
# =============================================================================


class TestCollectionFetch:
    @pytest.mark.asyncio
    async def test_default_page(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"count": 3, "results": [{"id": "c1"}, {"id": "c2"}]})
        comments = blog.comment.collection()
        items = comments.items

        await comments.get_collection()

        assert transport.last_request.url == "https://api.test/v1/comments?limit=20&offset=0"
        assert comments.items is items
        assert [c.id for c in comments] == ["c1", "c2"]
        assert comments.total_count == 3
        assert comments.has_more()
        assert all(not c.is_new for c in comments)

    @pytest.mark.asyncio
    async def test_bare_array(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond([{"id": "c1"}])
        comments = await blog.comment.collection().get_collection(params={"limit": 5, "tag": "x"})
        assert transport.last_request.url == "https://api.test/v1/comments?limit=5&tag=x&offset=0"
        assert comments.total_count == 1

    @pytest.mark.asyncio
    async def test_get_more_appends_next_page(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"count": 4, "results": [{"id": "c1"}, {"id": "c2"}]})
        transport.respond({"count": 4, "results": [{"id": "c3"}, {"id": "c4"}]})
        comments = blog.comment.collection()

        await comments.get_collection(params={"limit": 2})
        await comments.get_more()

        assert transport.last_request.url == "https://api.test/v1/comments?limit=2&offset=2"
        assert [c.id for c in comments] == ["c1", "c2", "c3", "c4"]
        assert comments.total_count == 4
        assert not comments.has_more()

    @pytest.mark.asyncio
    async def test_get_more_with_bare_arrays_keeps_count_consistent(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond([{"id": "c1"}, {"id": "c2"}]).respond([{"id": "c3"}])
        comments = blog.comment.collection()
        await comments.get_collection(params={"limit": 2})
        await comments.get_more()
        assert len(comments) == 3
        assert comments.total_count == 3

    @pytest.mark.asyncio
    async def test_get_more_keeps_action(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond([]).respond([])
        comments = blog.comment.collection()
        await comments.get_collection(action="flagged")
        await comments.get_more()
        assert transport.last_request.url == "https://api.test/v1/comments/flagged?limit=20&offset=20"

    @pytest.mark.asyncio
    async def test_get_more_requires_previous_page(self, blog: Blog) -> None:
        with pytest.raises(RuntimeError, match="get_collection"):
            await blog.comment.collection().get_more()

    @pytest.mark.asyncio
    async def test_failed_get_more_can_be_retried(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"count": 4, "results": [{"id": "c1"}, {"id": "c2"}]})
        transport.respond(status=503)
        transport.respond({"count": 4, "results": [{"id": "c3"}, {"id": "c4"}]})
        comments = blog.comment.collection()

        await comments.get_collection(params={"limit": 2})
        await comments.get_more()
        assert comments.fetch_failure
        await comments.get_more()

        assert transport.last_request.url == "https://api.test/v1/comments?limit=2&offset=2"
        assert [c.id for c in comments] == ["c1", "c2", "c3", "c4"]

    @pytest.mark.asyncio
    async def test_object_response_for_collection_fails(self, blog: Blog, transport: StubTransport) -> None:
        transport.respond({"id": "c1"})
        comments = await blog.comment.collection().get_collection()
        assert comments.fetch_failure
        assert comments.is_empty()
