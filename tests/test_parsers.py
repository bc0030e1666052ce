"""Test output parsers"""

# pyright: basic

import unittest

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.fake_chat_models import (
    GenericFakeChatModel,
)

from lcnotes.language_models.message_iterator import (
    yield_scripted_messages,
)
from lcnotes.language_models.parsers import (
    ScoredAnswer,
    create_fixing_parser,
    create_list_parser,
    create_schema_parser,
    create_structured_parser,
)


class TestStructuredParser(unittest.TestCase):

    def setUp(self):
        self.parser = create_structured_parser(
            {
                'answer': "the answer",
                'evidence': "the evidence",
            }
        )

    def test_instructions_name_fields(self):
        instructions = self.parser.get_format_instructions()
        self.assertIn("answer", instructions)
        self.assertIn("evidence", instructions)

    def test_parse_markdown_json(self):
        result = self.parser.parse(
            '```json\n{"answer": "42", "evidence": "the book"}\n```'
        )
        self.assertEqual(result, {'answer': "42", 'evidence': "the book"})

    def test_missing_field(self):
        with self.assertRaises(OutputParserException):
            self.parser.parse('```json\n{"answer": "42"}\n```')


class TestListParser(unittest.TestCase):

    def test_parse(self):
        parser = create_list_parser()
        self.assertEqual(
            parser.parse("Toei, Sunrise, Kyoto Animation"),
            ["Toei", "Sunrise", "Kyoto Animation"],
        )
        self.assertIn("comma", parser.get_format_instructions())


class TestSchemaParser(unittest.TestCase):

    def test_parse(self):
        parser = create_schema_parser(ScoredAnswer)
        result = parser.parse('{"answer": "1981", "confidence": 90}')
        self.assertEqual(result, ScoredAnswer(answer="1981", confidence=90))

    def test_out_of_range(self):
        parser = create_schema_parser(ScoredAnswer)
        with self.assertRaises(OutputParserException):
            parser.parse('{"answer": "1981", "confidence": 150}')


class TestFixingParser(unittest.TestCase):

    def test_fixes_format(self):
        model = GenericFakeChatModel(
            messages=yield_scripted_messages(
                ['{"answer": "1981", "confidence": 95}']
            )
        )
        parser = create_fixing_parser(
            model, create_schema_parser(ScoredAnswer)
        )
        result = parser.parse(
            '{"answer": "1981", "confidence": "very high"}'
        )
        self.assertEqual(result.confidence, 95)

    def test_valid_output_not_sent_to_model(self):
        model = GenericFakeChatModel(messages=yield_scripted_messages([]))
        parser = create_fixing_parser(
            model, create_schema_parser(ScoredAnswer)
        )
        result = parser.parse('{"answer": "1981", "confidence": 80}')
        self.assertEqual(result.answer, "1981")

    def test_gives_up(self):
        model = GenericFakeChatModel(
            messages=yield_scripted_messages(["still not json"])
        )
        parser = create_fixing_parser(
            model, create_schema_parser(ScoredAnswer), max_retries=1
        )
        with self.assertRaises(OutputParserException):
            parser.parse("not json")


if __name__ == "__main__":
    unittest.main()
