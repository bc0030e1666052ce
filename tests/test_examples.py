"""Test the example modules with fake chat models"""

# pyright: basic

import asyncio
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from langchain_core.language_models.fake_chat_models import (
    GenericFakeChatModel,
)
from langchain_core.tracers.log_stream import RunLogPatch

from lcnotes.examples import invocation, loading, parsing, templates
from lcnotes.language_models.message_iterator import (
    yield_constant_message,
    yield_scripted_messages,
)
from lcnotes.language_models.parsers import ScoredAnswer
from lcnotes.utils.logging import LoglistLogger


class FailingMessages:
    """Makes a fake chat model raise at every call"""

    def __iter__(self):
        return self

    def __next__(self) -> str:
        raise ConnectionError("endpoint unreachable")


def _fake_model(*messages: str) -> GenericFakeChatModel:
    if len(messages) == 1:
        return GenericFakeChatModel(
            messages=yield_constant_message(messages[0])
        )
    return GenericFakeChatModel(messages=yield_scripted_messages(messages))


class TestInvocationExamples(unittest.TestCase):

    def setUp(self):
        self.logger = LoglistLogger()

    def test_invoke(self):
        response = invocation.invoke_chat(
            _fake_model("a joke"), logger=self.logger
        )
        self.assertEqual(response, "a joke")
        self.assertEqual(self.logger.get_logs(), ["INFO - invoke chat: a joke"])

    def test_invoke_parsed(self):
        response = invocation.invoke_parsed_chat(
            _fake_model("another joke"), logger=self.logger
        )
        self.assertEqual(response, "another joke")

    def test_batch(self):
        responses = invocation.batch_chat(
            _fake_model("answer"),
            ["first?", "second?", "third?"],
            logger=self.logger,
        )
        self.assertEqual(responses, ["answer"] * 3)

    def test_stream(self):
        chunks = asyncio.run(
            invocation.stream_chat(
                _fake_model("hello streaming world"), logger=self.logger
            )
        )
        self.assertGreater(len(chunks), 1)
        self.assertEqual("".join(chunks), "hello streaming world")

    def test_stream_log(self):
        patches = asyncio.run(
            invocation.stream_log_chat(
                _fake_model("hello world"), logger=self.logger
            )
        )
        self.assertTrue(patches)
        self.assertTrue(all(isinstance(p, RunLogPatch) for p in patches))

    def test_fallback(self):
        error_model = GenericFakeChatModel(messages=FailingMessages())
        response = invocation.fallback_chat(
            _fake_model("recovered"), error_model, logger=self.logger
        )
        self.assertEqual(response, "recovered")
        logs = self.logger.get_logs()
        self.assertTrue(logs[0].startswith("ERROR - chain without fallback"))
        self.assertEqual(logs[-1], "INFO - fallback chat: recovered")


class TestTemplateExamples(unittest.TestCase):

    def setUp(self):
        self.logger = LoglistLogger()

    def test_static(self):
        self.assertEqual(
            templates.static_prompt(logger=self.logger), "Hello, World!"
        )

    def test_parameterized_keeps_escaped_braces(self):
        self.assertEqual(
            templates.parameterized_prompt(logger=self.logger),
            "good afternoon, John, {test}",
        )

    def test_inferred(self):
        self.assertEqual(
            templates.inferred_prompt("morning", "Ann", logger=self.logger),
            "good morning, Ann",
        )

    def test_partial(self):
        self.assertEqual(
            templates.partial_prompt(logger=self.logger),
            [
                "This is a feline, it is a tiger",
                "This is a feline, it is a house cat",
            ],
        )

    def test_greeting(self):
        def date():
            return "1/2/2025"

        self.assertEqual(
            templates.get_greeting("morning", date),
            "1/2/2025 good morning!",
        )
        self.assertEqual(
            templates.get_greeting("midnight", date), "1/2/2025 hello!"
        )

    def test_dynamic_partial_calls_function(self):
        calls = []

        def date():
            calls.append(1)
            return "1/2/2025"

        text = templates.dynamic_partial_prompt(
            "evening", "Shall we go?", date, logger=self.logger
        )
        self.assertEqual(
            text,
            "Today is 1/2/2025, 1/2/2025 good evening!, Shall we go?",
        )
        self.assertEqual(len(calls), 2)

    def test_translation_messages(self):
        messages = templates.translation_messages(
            "English", "Italian", "Good morning", logger=self.logger
        )
        self.assertIn("from English to Italian", messages[0].content)
        self.assertIn("Good morning", messages[1].content)

    def test_translation_chain(self):
        response = templates.translation_chain(
            _fake_model("Buongiorno"), "English", "Italian",
            "Good morning", logger=self.logger,
        )
        self.assertEqual(response, "Buongiorno")

    def test_combined(self):
        text = templates.combined_prompt(
            name="Jane",
            sex="female",
            food="soup",
            now=datetime(2025, 1, 2, 12, 30),
            logger=self.logger,
        )
        self.assertIn("name: Jane, sex: female", text)
        self.assertIn("I would like to eat soup", text)
        # the personal information is reused in two places
        self.assertEqual(text.count("name: Jane"), 2)


class TestParsingExamples(unittest.TestCase):

    def setUp(self):
        self.logger = LoglistLogger()

    def test_string(self):
        self.assertEqual(
            parsing.string_output(_fake_model("fine"), logger=self.logger),
            "fine",
        )

    def test_structured(self):
        model = _fake_model(
            '```json\n{"answer": "a", "evidence": "b", "confidence": "c"}\n```'
        )
        response = parsing.structured_output(model, logger=self.logger)
        self.assertEqual(
            response, {'answer': "a", 'evidence': "b", 'confidence': "c"}
        )

    def test_list(self):
        response = parsing.list_output(
            _fake_model("Toei, Sunrise"), logger=self.logger
        )
        self.assertEqual(response, ["Toei", "Sunrise"])

    def test_schema(self):
        response = parsing.schema_output(
            _fake_model('{"answer": "1981", "confidence": 70}'),
            logger=self.logger,
        )
        self.assertEqual(response, ScoredAnswer(answer="1981", confidence=70))

    def test_fixed(self):
        model = _fake_model('{"answer": "1981", "confidence": 99}')
        response = parsing.fixed_output(
            '{"answer": "1981", "confidence": "high"}',
            model,
            logger=self.logger,
        )
        self.assertEqual(response.confidence, 99)


class TestLoadingExamples(unittest.TestCase):

    def setUp(self):
        self.logger = LoglistLogger()

    def test_custom_document(self):
        document = loading.custom_document(logger=self.logger)
        self.assertEqual(document.metadata, {'source': "ABC title"})

    def test_assets_folder(self):
        documents = loading.directory_documents(logger=self.logger)
        self.assertGreaterEqual(len(documents), 1)
        self.assertIn("Little Rock Pond", documents[0].page_content)

    def test_text_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "poem.txt"
            path.write_text("clear water", encoding="utf-8")
            documents = loading.text_file_documents(path, logger=self.logger)
        self.assertEqual(documents[0].page_content, "clear water")


if __name__ == "__main__":
    unittest.main()
