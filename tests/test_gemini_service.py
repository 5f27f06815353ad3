"""
Unit tests for the Gemini model adapter and the classification invoker
"""

from unittest.mock import Mock

import pytest
from google.genai import types

from conftest import StubModel
from hscode_centrovert.exceptions import ModelInvocationError, NoResponseError
from hscode_centrovert.models.hs_models import MultimodalRequest, RetrievalTool
from hscode_centrovert.services.gemini_service import ClassificationInvoker, GeminiModel, GenerationConfig


def _request(tools=frozenset()):
    return MultimodalRequest(parts=({"text": "classify"},), system_instruction="be strict",
                             temperature=0.1, tools=tools)


class TestClassificationInvoker:
    """Test cases for ClassificationInvoker.invoke"""

    def test_passes_decoding_configuration(self):
        """Test that temperature, system instruction and tools reach the model"""
        model = StubModel('{"hsCode": "0902.10"}')
        text = ClassificationInvoker(model).invoke(_request(frozenset({RetrievalTool.WEB_SEARCH})))

        assert text == '{"hsCode": "0902.10"}'
        parts, config = model.calls[0]
        assert parts == [{"text": "classify"}]
        assert config == GenerationConfig(temperature=0.1, system_instruction="be strict",
                                          tools=frozenset({RetrievalTool.WEB_SEARCH}))

    @pytest.mark.parametrize("text", ["", None])
    def test_no_text(self, text):
        """Test that an absent payload raises NoResponseError"""
        with pytest.raises(NoResponseError):
            ClassificationInvoker(StubModel(text)).invoke(_request())

    def test_whitespace_is_handed_on(self):
        """Test that non-empty text is returned even when it is only whitespace"""
        assert ClassificationInvoker(StubModel("  \n")).invoke(_request()) == "  \n"

    def test_model_exception_is_wrapped(self):
        """Test that SDK errors become ModelInvocationError with the cause attached"""
        model = Mock(model_name="broken")
        model.generate.side_effect = ConnectionError("reset")
        with pytest.raises(ModelInvocationError) as exc_info:
            ClassificationInvoker(model).invoke(_request())
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestGeminiModel:
    """Test cases for the google-genai adapter"""

    def setup_method(self):
        self.client = Mock()
        self.client.models.generate_content.return_value = Mock(text='{"hsCode": "1"}')
        self.model = GeminiModel(client=self.client, model_name="gemini-test")

    def test_search_tool_enabled(self):
        """Test that the web search selection adds the Google Search tool"""
        config = GenerationConfig(0.1, "sys", frozenset({RetrievalTool.WEB_SEARCH}))
        assert self.model.generate([{"text": "hi"}], config) == '{"hsCode": "1"}'

        kwargs = self.client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        sent = kwargs["config"]
        assert sent.temperature == 0.1
        assert sent.system_instruction == "sys"
        assert len(sent.tools) == 1
        assert sent.tools[0].google_search is not None

    def test_no_tools(self):
        """Test that no tools are sent when none are selected"""
        self.model.generate([{"text": "hi"}], GenerationConfig(0.1, "sys"))
        sent = self.client.models.generate_content.call_args.kwargs["config"]
        assert not sent.tools

    def test_parts_conversion(self):
        """Test that image and text parts are converted in order"""
        parts = [{"inline_data": {"data": b"img", "mime_type": "image/png"}}, {"text": "describe"}]
        self.model.generate(parts, GenerationConfig(0.1, "sys"))

        contents = self.client.models.generate_content.call_args.kwargs["contents"]
        sent_parts = contents[0].parts
        assert sent_parts[0].inline_data.data == b"img"
        assert sent_parts[0].inline_data.mime_type == "image/png"
        assert sent_parts[1].text == "describe"

    def test_to_part_text(self):
        """Test the text part conversion on its own"""
        part = GeminiModel._to_part({"text": "hello"})
        assert isinstance(part, types.Part)
        assert part.text == "hello"
