"""Tests for request translation (generic -> OpenAI chat completions)."""

import json
import math
import pytest

from openrouter_model import (
    Content, EncodingError, FunctionDeclaration, GenerateContentConfig,
    LLMRequest, Part, Schema, Tool
)
from openrouter_model.genai_to_openai import (
    extract_text, join_strings, translate_content, translate_function_declaration,
    translate_request, translate_role, translate_schema
)


class TestTranslateRole:
    @pytest.mark.parametrize("role,expected", [
        ("model", "assistant"),
        ("assistant", "assistant"),
        ("system", "system"),
        ("tool", "tool"),
        ("user", "user"),
        ("", "user"),
        ("unknown", "user"),
        ("USER", "user"),
        ("Model", "user"),
    ])
    def test_role_mapping(self, role, expected):
        assert translate_role(role) == expected


class TestJoinStrings:
    def test_empty(self):
        assert join_strings([]) == ""

    def test_skips_nothing_between_parts(self):
        assert join_strings(["a", "", "b"]) == "ab"

    def test_keeps_whitespace_parts(self):
        assert join_strings(["hello", " ", "world"]) == "hello world"


class TestExtractText:
    def test_concatenates_text_parts(self):
        content = Content(role="system", parts=[Part.from_text("You are "), Part.from_text("helpful.")])
        assert extract_text(content) == "You are helpful."

    def test_ignores_function_parts(self):
        content = Content(parts=[
            Part.from_text("a"),
            Part.from_function_call("f", {}),
            Part.from_text("b"),
        ])
        assert extract_text(content) == "ab"

    def test_no_parts(self):
        assert extract_text(Content()) == ""


class TestTranslateSchema:
    def test_empty_schema(self):
        assert translate_schema(Schema()) == {}

    def test_simple(self):
        assert translate_schema(Schema(type="string", description="A city")) == {
            "type": "string",
            "description": "A city",
        }

    def test_enum_kept_in_order(self):
        result = translate_schema(Schema(type="string", enum=["celsius", "fahrenheit"]))
        assert result == {"type": "string", "enum": ["celsius", "fahrenheit"]}

    def test_array_only_has_type_and_items(self):
        result = translate_schema(Schema(type="array", items=Schema(type="string")))
        assert result == {"type": "array", "items": {"type": "string"}}

    def test_object(self):
        schema = Schema(
            type="object",
            properties={
                "city": Schema(type="string", description="City name"),
                "unit": Schema(type="string", enum=["celsius", "fahrenheit"]),
            },
            required=["city"],
        )
        assert translate_schema(schema) == {
            "type": "object",
            "properties": {
                "city": {"type": "string", "description": "City name"},
                "unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
            },
            "required": ["city"],
        }

    def test_never_emits_none_values(self):
        result = translate_schema(Schema(type="object", properties={"a": Schema()}))
        assert result == {"type": "object", "properties": {"a": {}}}


class TestTranslateFunctionDeclaration:
    def test_structured_parameters(self):
        fn = FunctionDeclaration(
            name="get_weather",
            description="Get weather for a city",
            parameters=Schema(type="object", properties={"city": Schema(type="string")}),
        )
        assert translate_function_declaration(fn) == {
            "type": "function",
            "function": {
                "name": "get_weather",
                "description": "Get weather for a city",
                "parameters": {"type": "object", "properties": {"city": {"type": "string"}}},
            },
        }

    def test_json_schema_passed_through(self):
        raw = {"type": "object", "properties": {"q": {"type": "string"}}, "additionalProperties": False}
        fn = FunctionDeclaration(name="search", parameters_json_schema=raw)
        assert translate_function_declaration(fn)["function"]["parameters"] is raw

    def test_structured_wins_over_json_schema(self):
        fn = FunctionDeclaration(
            name="f",
            parameters=Schema(type="object"),
            parameters_json_schema={"type": "string"},
        )
        assert translate_function_declaration(fn)["function"]["parameters"] == {"type": "object"}

    def test_no_parameters(self):
        result = translate_function_declaration(FunctionDeclaration(name="get_time"))
        assert result == {"type": "function", "function": {"name": "get_time"}}


class TestTranslateContent:
    def test_text_message(self):
        messages = translate_content(Content(role="user", parts=[Part.from_text("Hello!")]))
        assert messages == [{"role": "user", "content": "Hello!"}]

    def test_model_text_becomes_assistant(self):
        messages = translate_content(Content(role="model", parts=[Part.from_text("Hi there!")]))
        assert messages == [{"role": "assistant", "content": "Hi there!"}]

    def test_text_parts_concatenated_without_separator(self):
        messages = translate_content(Content(role="user", parts=[
            Part.from_text("Hello"), Part.from_text(", "), Part.from_text("world"),
        ]))
        assert messages[0]["content"] == "Hello, world"

    def test_function_call(self):
        content = Content(role="model", parts=[
            Part.from_function_call("get_weather", {"city": "Paris"}, call_id="call_1"),
        ])
        messages = translate_content(content)

        assert len(messages) == 1
        message = messages[0]
        assert message["role"] == "assistant"
        assert "content" not in message
        assert message["tool_calls"] == [{
            "id": "call_1",
            "type": "function",
            "function": {"name": "get_weather", "arguments": '{"city": "Paris"}'},
        }]

    def test_arguments_are_json_strings(self):
        content = Content(role="model", parts=[
            Part.from_function_call("f", {"n": 1, "nested": {"x": [1, 2]}}, call_id="c"),
        ])
        arguments = translate_content(content)[0]["tool_calls"][0]["function"]["arguments"]
        assert isinstance(arguments, str)
        assert json.loads(arguments) == {"n": 1, "nested": {"x": [1, 2]}}

    def test_function_calls_always_sent_as_assistant(self):
        content = Content(role="user", parts=[Part.from_function_call("f", {}, call_id="c")])
        assert translate_content(content)[0]["role"] == "assistant"

    def test_text_and_function_calls_share_one_message(self):
        content = Content(role="model", parts=[
            Part.from_text("Let me check."),
            Part.from_function_call("a", {}, call_id="1"),
            Part.from_function_call("b", {}, call_id="2"),
        ])
        messages = translate_content(content)

        assert len(messages) == 1
        assert messages[0]["content"] == "Let me check."
        assert [tc["id"] for tc in messages[0]["tool_calls"]] == ["1", "2"]

    def test_function_response(self):
        content = Content(role="user", parts=[
            Part.from_function_response(
                "get_weather", {"temperature": 20, "unit": "celsius"}, call_id="call_123"
            ),
        ])
        messages = translate_content(content)

        assert len(messages) == 1
        message = messages[0]
        assert message["role"] == "tool"
        assert message["tool_call_id"] == "call_123"
        assert json.loads(message["content"]) == {"temperature": 20, "unit": "celsius"}

    def test_each_function_response_is_its_own_message(self):
        content = Content(role="user", parts=[
            Part.from_function_response("a", {"v": 1}, call_id="1"),
            Part.from_text("thanks"),
            Part.from_function_response("b", {"v": 2}, call_id="2"),
        ])
        messages = translate_content(content)

        assert [m["role"] for m in messages] == ["tool", "tool", "user"]
        assert [m.get("tool_call_id") for m in messages[:2]] == ["1", "2"]
        assert messages[2] == {"role": "user", "content": "thanks"}

    def test_empty_content(self):
        assert translate_content(Content(role="user", parts=[])) == []

    def test_empty_text_only_yields_nothing(self):
        assert translate_content(Content(role="user", parts=[Part.from_text("")])) == []

    def test_unserializable_args_raise(self):
        content = Content(role="model", parts=[
            Part.from_function_call("f", {"when": object()}, call_id="c"),
        ])
        with pytest.raises(EncodingError, match="function call args"):
            translate_content(content)

    def test_non_finite_floats_raise(self):
        content = Content(role="user", parts=[
            Part.from_function_response("f", {"value": math.nan}, call_id="c"),
        ])
        with pytest.raises(EncodingError, match="function response"):
            translate_content(content)


class TestTranslateRequest:
    def test_basic(self):
        request = LLMRequest(contents=[Content.from_text("Hello!")])
        result = translate_request(request, "openai/gpt-4")

        assert result == {
            "model": "openai/gpt-4",
            "messages": [{"role": "user", "content": "Hello!"}],
        }

    def test_empty_contents(self):
        result = translate_request(LLMRequest(contents=[]), "test-model")
        assert result["messages"] == []

    def test_multiple_messages_keep_order(self):
        request = LLMRequest(contents=[
            Content.from_text("Hello", role="user"),
            Content.from_text("Hi there!", role="model"),
            Content.from_text("How are you?", role="user"),
        ])
        result = translate_request(request, "test-model")
        assert [m["role"] for m in result["messages"]] == ["user", "assistant", "user"]

    def test_system_instruction_prepended(self):
        request = LLMRequest(
            contents=[Content.from_text("What time is it?")],
            config=GenerateContentConfig(
                system_instruction=Content(parts=[Part.from_text("You are a helpful assistant.")])
            ),
        )
        messages = translate_request(request, "test-model")["messages"]

        assert len(messages) == 2
        assert messages[0] == {"role": "system", "content": "You are a helpful assistant."}
        assert messages[1]["role"] == "user"

    def test_system_instruction_not_deduplicated(self):
        request = LLMRequest(
            contents=[Content.from_text("Be terse.", role="system"), Content.from_text("Hi")],
            config=GenerateContentConfig(system_instruction=Content.from_text("Be kind.")),
        )
        messages = translate_request(request, "test-model")["messages"]

        assert [m["role"] for m in messages] == ["system", "system", "user"]
        assert messages[0]["content"] == "Be kind."

    def test_tools_in_declaration_order(self):
        request = LLMRequest(
            contents=[Content.from_text("What's the weather?")],
            config=GenerateContentConfig(tools=[
                Tool(function_declarations=[
                    FunctionDeclaration(
                        name="get_weather",
                        description="Get weather for a city",
                        parameters=Schema(type="object", properties={"city": Schema(type="string")}),
                    ),
                    FunctionDeclaration(name="get_time"),
                ]),
                Tool(function_declarations=[FunctionDeclaration(name="search")]),
            ]),
        )
        tools = translate_request(request, "test-model")["tools"]

        assert [t["function"]["name"] for t in tools] == ["get_weather", "get_time", "search"]
        assert all(t["type"] == "function" for t in tools)

    def test_generation_config(self):
        request = LLMRequest(
            contents=[Content.from_text("Hello!")],
            config=GenerateContentConfig(
                temperature=0.7,
                top_p=0.9,
                max_output_tokens=1000,
                stop_sequences=["END", "STOP"],
            ),
        )
        result = translate_request(request, "test-model")

        assert result["temperature"] == 0.7
        assert result["top_p"] == 0.9
        assert result["max_completion_tokens"] == 1000
        assert result["stop"] == ["END", "STOP"]

    def test_zero_temperature_is_sent(self):
        request = LLMRequest(
            contents=[Content.from_text("Hello!")],
            config=GenerateContentConfig(temperature=0.0, top_p=0.0),
        )
        result = translate_request(request, "test-model")

        assert result["temperature"] == 0.0
        assert result["top_p"] == 0.0

    def test_zero_max_output_tokens_is_omitted(self):
        request = LLMRequest(
            contents=[Content.from_text("Hello!")],
            config=GenerateContentConfig(max_output_tokens=0),
        )
        assert "max_completion_tokens" not in translate_request(request, "test-model")

    def test_unset_options_are_omitted(self):
        request = LLMRequest(contents=[Content.from_text("Hello!")], config=GenerateContentConfig())
        result = translate_request(request, "test-model")

        for key in ("temperature", "top_p", "max_completion_tokens", "stop", "tools"):
            assert key not in result

    def test_encoding_failure_propagates(self):
        request = LLMRequest(contents=[
            Content(role="model", parts=[Part.from_function_call("f", {"x": {1, 2}})]),
        ])
        with pytest.raises(EncodingError):
            translate_request(request, "test-model")
