import json
from urllib.parse import parse_qsl, urlsplit

import anyio
import pytest
from pydantic import BaseModel

from restline import (
    BuildError,
    ContentType,
    EncodingError,
    HttpMethod,
    InvalidURLError,
    RequestBuilder,
    TransportRequest,
)


class User(BaseModel):
    id: int
    name: str


class SlowTransport:
    def __init__(self) -> None:
        self.cancelled = False

    def execute(self, method, url, headers, body):
        raise AssertionError("sync path not expected")

    async def execute_async(self, method, url, headers, body):
        try:
            await anyio.sleep(10)
        except anyio.get_cancelled_exc_class():
            self.cancelled = True
            raise
        return 200, {}, b"{}"


class TestRequestBuilder:
    class TestModifiers:
        def test_modifiers_return_new_instances(self):
            original = RequestBuilder.get("https://api.example.com/items")
            with_header = original.with_header("X-Trace", "1")
            with_params = with_header.with_params({"page": 2})

            assert original.headers == {}
            assert original.params == {}
            assert with_header.headers == {"X-Trace": "1"}
            assert with_header.params == {}
            assert with_params.params == {"page": 2}

        def test_state_is_read_only(self):
            request = RequestBuilder.get("https://api.example.com").with_header("A", "1")
            with pytest.raises(TypeError):
                request.headers["A"] = "2"  # type: ignore[index]
            with pytest.raises(AttributeError):
                request.url = "https://other.example.com"  # type: ignore[misc]

        def test_constructor_copies_caller_mappings(self):
            params = {"a": 1}
            request = RequestBuilder("https://api.example.com", params=params)
            params["a"] = 2
            assert request.params == {"a": 1}

        def test_header_names_are_case_insensitive(self):
            request = (
                RequestBuilder.get("https://api.example.com")
                .with_header("Authorization", "Bearer old")
                .with_header("authorization", "Bearer new")
            )

            assert request.headers == {"authorization": "Bearer new"}
            assert request.header("AUTHORIZATION") == "Bearer new"
            assert request.build().headers == {"authorization": "Bearer new"}

        def test_with_headers_applies_in_order(self):
            request = RequestBuilder.get("https://api.example.com").with_headers(
                {"X-A": "1", "x-a": "2", "X-B": "3"}
            )
            assert request.headers == {"x-a": "2", "X-B": "3"}

        def test_with_params_merges_and_overwrites(self):
            request = (
                RequestBuilder.post("https://api.example.com")
                .with_params({"a": 1, "b": 2})
                .with_params({"b": 3, "c": 4})
            )
            assert request.params == {"a": 1, "b": 3, "c": 4}

        def test_with_auth_defaults_to_authorization_header(self):
            request = RequestBuilder.get("https://api.example.com").with_auth("Bearer t")
            assert request.header("Authorization") == "Bearer t"

        def test_with_auth_custom_header(self):
            request = RequestBuilder.get("https://api.example.com").with_auth(
                "key-123", header="X-Api-Key"
            )
            assert request.headers == {"X-Api-Key": "key-123"}

        def test_content_and_accept_types_stamp_headers(self):
            request = (
                RequestBuilder.post("https://api.example.com")
                .with_content_type(ContentType.FORM)
                .with_accept_type(ContentType.PDF)
            )

            assert request.content_type is ContentType.FORM
            assert request.accept_type is ContentType.PDF
            assert request.header("Content-Type") == ContentType.FORM.value
            assert request.header("Accept") == "application/pdf"

        def test_with_url_replaces_base_url(self):
            request = RequestBuilder.get("https://a.example.com").with_url(
                "https://b.example.com"
            )
            assert request.url == "https://b.example.com"

        @pytest.mark.parametrize(
            "factory, method",
            [
                (RequestBuilder.get, HttpMethod.GET),
                (RequestBuilder.post, HttpMethod.POST),
                (RequestBuilder.put, HttpMethod.PUT),
                (RequestBuilder.delete, HttpMethod.DELETE),
                (RequestBuilder.patch, HttpMethod.PATCH),
            ],
        )
        def test_method_shortcuts(self, factory, method):
            assert factory("https://api.example.com").method is method

        def test_method_strings_are_coerced(self):
            assert RequestBuilder("https://api.example.com", "post").method is (
                HttpMethod.POST
            )

        def test_unknown_method_is_a_build_error(self):
            with pytest.raises(BuildError, match="TRACE"):
                RequestBuilder("https://api.example.com", "TRACE")

        def test_header_without_value_is_rejected(self):
            request = RequestBuilder.get("https://api.example.com")
            with pytest.raises(TypeError, match="X-A"):
                request.with_header("X-A", None)
            with pytest.raises(TypeError):
                RequestBuilder("https://api.example.com", headers={"X-A": None})

    class TestBuild:
        def test_get_merges_params_into_query(self):
            built = (
                RequestBuilder.get("https://api.example.com/items?sort=asc")
                .with_params({"sort": "desc", "limit": 10})
                .build()
            )

            items = parse_qsl(urlsplit(built.url).query)
            assert ("limit", "10") in items
            assert ("sort", "desc") in items
            assert ("sort", "asc") not in items
            assert built.method is HttpMethod.GET
            assert built.body is None

        def test_post_json_body(self):
            built = (
                RequestBuilder.post("https://api.example.com/users")
                .with_content_type(ContentType.JSON)
                .with_params({"name": "Ada"})
                .build()
            )

            assert built.body == b'{"name":"Ada"}'
            assert json.loads(built.body) == {"name": "Ada"}
            assert built.header("Content-Type") == ContentType.JSON.value
            assert built.url == "https://api.example.com/users"

        def test_post_does_not_touch_query(self):
            built = (
                RequestBuilder.post("https://api.example.com/users?dry_run=1")
                .with_params({"name": "Ada"})
                .build()
            )
            assert built.url == "https://api.example.com/users?dry_run=1"

        def test_form_body(self):
            built = (
                RequestBuilder.put("https://api.example.com/profile")
                .with_content_type(ContentType.FORM)
                .with_params({"a": "x y", "b": ["1", "2"]})
                .build()
            )
            assert built.body == b"a=x%20y&b=1&b=2"

        def test_delete_encodes_params_in_body(self):
            built = (
                RequestBuilder.delete("https://api.example.com/items")
                .with_params({"ids": [1, 2]})
                .build()
            )
            assert built.body == b'{"ids":[1,2]}'
            assert built.url == "https://api.example.com/items"

        def test_post_without_params_has_no_body(self):
            assert RequestBuilder.post("https://api.example.com").build().body is None

        def test_multipart_params_fail(self):
            request = (
                RequestBuilder.post("https://api.example.com/upload")
                .with_content_type(ContentType.MULTIPART)
                .with_params({"file": "x"})
            )
            with pytest.raises(EncodingError):
                request.build()

        def test_unserializable_json_param_fails(self):
            request = RequestBuilder.post("https://api.example.com").with_params(
                {"when": object()}
            )
            with pytest.raises(EncodingError):
                request.build()

        @pytest.mark.parametrize("method", list(HttpMethod))
        def test_invalid_base_url(self, method: HttpMethod):
            with pytest.raises(InvalidURLError):
                RequestBuilder("api/items", method).build()

        def test_non_ascii_header_fails_before_sending(self, fake_transport):
            request = RequestBuilder.get("https://api.example.com").with_header(
                "X-City", "Zürich"
            )

            with pytest.raises(EncodingError, match="X-City"):
                request.build()
            with pytest.raises(BuildError):
                request.send(fake_transport)
            assert fake_transport.calls == []

        def test_invalid_url_without_params_still_fails(self):
            with pytest.raises(BuildError):
                RequestBuilder.get("not a url").build()

        def test_build_is_idempotent(self):
            request = (
                RequestBuilder.post("https://api.example.com/orders")
                .with_header("X-Trace", "abc")
                .with_params({"item": "book", "tags": ["a", "b"]})
            )

            first = request.build()
            second = request.build()

            assert first == second
            assert first.body == second.body
            assert first is not second

        def test_built_headers_are_a_copy(self):
            request = RequestBuilder.get("https://api.example.com").with_header("A", "1")
            built = request.build()
            built.headers["A"] = "changed"
            assert request.build().headers == {"A": "1"}

        def test_custom_body_encoder(self):
            built = (
                RequestBuilder.post("https://api.example.com")
                .with_params({"a": 1})
                .with_body_encoder(lambda params: json.dumps(params, indent=2).encode())
                .build()
            )
            assert built.body == b'{\n  "a": 1\n}'

        def test_failing_body_encoder_raises_encoding_error(self):
            def broken(params):
                raise RuntimeError("boom")

            request = RequestBuilder.post("https://api.example.com").with_body_encoder(
                broken
            )
            with pytest.raises(EncodingError, match="boom") as exc_info:
                request.build()
            assert isinstance(exc_info.value.__cause__, RuntimeError)

        def test_array_body(self):
            built = (
                RequestBuilder.post("https://api.example.com")
                .with_params({"a": 1})
                .with_array_body()
                .build()
            )
            assert built.body == b'[{"a":1}]'

        def test_empty_transport_request(self):
            empty = TransportRequest.empty()
            assert empty.method is HttpMethod.GET
            assert empty.url == ""
            assert empty.headers == {}
            assert empty.body is None

    class TestSend:
        def test_send_hands_built_request_to_transport(self, fake_transport):
            fake_transport.respond_with(201, json_body={"id": 1, "name": "Ada"})

            response = (
                RequestBuilder.post("https://api.example.com/users")
                .with_content_type(ContentType.JSON)
                .with_params({"name": "Ada"})
                .send(fake_transport)
            )

            assert response.status_code == 201
            assert response.json == {"id": 1, "name": "Ada"}
            assert fake_transport.calls == [
                {
                    "method": "POST",
                    "url": "https://api.example.com/users",
                    "headers": {"Content-Type": ContentType.JSON.value},
                    "body": b'{"name":"Ada"}',
                }
            ]

        def test_send_as_decodes(self, fake_transport):
            fake_transport.respond_with(json_body={"id": 1, "name": "Ada"})

            user = RequestBuilder.get("https://api.example.com/users/1").send_as(
                User, fake_transport
            )

            assert user == User(id=1, name="Ada")

        def test_build_errors_happen_before_transport(self, fake_transport):
            with pytest.raises(InvalidURLError):
                RequestBuilder.get("nope").send(fake_transport)
            assert fake_transport.calls == []

        @pytest.mark.anyio
        async def test_send_async(self, fake_transport):
            fake_transport.respond_with(json_body=[{"id": 1, "name": "Ada"}])

            users = await RequestBuilder.get(
                "https://api.example.com/users"
            ).send_as_async(list[User], fake_transport)

            assert users == [User(id=1, name="Ada")]
            assert fake_transport.calls[0]["method"] == "GET"

        @pytest.mark.anyio
        async def test_cancellation_reaches_transport(self):
            transport = SlowTransport()
            request = RequestBuilder.get("https://api.example.com/slow")

            with anyio.move_on_after(0.05) as scope:
                await request.send_async(transport)

            assert scope.cancelled_caught
            assert transport.cancelled
