#!/usr/bin/env python3
"""
Chat flow tests: prompt assembly, the Groq client, canned replies and the
ask controller. All HTTP calls are mocked.
"""

import os
import sys
import unittest
from unittest.mock import Mock, patch

import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from rksd_assistant.app.controller import ChatController
from rksd_assistant.app.fallback import TECHNICAL_DIFFICULTIES_REPLY, fallback_reply
from rksd_assistant.app.generate import GenerationClient, GenerationError
from rksd_assistant.app.prompt_builder import PromptBuilder
from rksd_assistant.data.storage import MemStorage, Storage, StorageError
from rksd_assistant.schemas.storage_models import ChatMessage, CollegeInfo, MessageRole


def groq_response(content, status_code=200):
    response = Mock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = "error body"
    response.json.return_value = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return response


class TestPromptBuilder(unittest.TestCase):
    def setUp(self):
        self.builder = PromptBuilder()
        self.facts = [
            CollegeInfo(id="1", category="hostel", title="Hostel Timings", content="Boys 10 PM."),
            CollegeInfo(id="2", category="events", title="Fest", content='"Technova" in {March}.'),
        ]

    def test_context_is_one_line_per_fact(self):
        self.assertEqual(self.builder.build_context(self.facts),
                         'Hostel Timings: Boys 10 PM.\nFest: "Technova" in {March}.')

    def test_prompt_embeds_context(self):
        prompt = self.builder.build_prompt(self.facts)
        self.assertTrue(prompt.startswith("You are RK, the official AI Assistant of RKSD College."))
        self.assertIn("College Information:\nHostel Timings: Boys 10 PM.", prompt)
        self.assertIn("{March}", prompt)
        self.assertNotIn("{context}", prompt)

    def test_messages(self):
        messages = self.builder.build_messages("Hostel kab band hota hai?", self.facts)
        self.assertEqual([m["role"] for m in messages], ["system", "user"])
        self.assertEqual(messages[1]["content"], "Hostel kab band hota hai?")


class TestGenerationClient(unittest.TestCase):
    def setUp(self):
        self.client = GenerationClient(api_key="gsk_test")
        self.messages = [{"role": "user", "content": "Namaste"}]

    @patch("rksd_assistant.app.generate.requests.post")
    def test_returns_first_choice(self, mock_post):
        mock_post.return_value = groq_response("  Namaste! 👋  ")
        self.assertEqual(self.client.generate_answer(self.messages), "Namaste! 👋")

        _, kwargs = mock_post.call_args
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer gsk_test")
        self.assertEqual(kwargs["json"]["model"], "llama-3.3-70b-versatile")
        self.assertEqual(kwargs["json"]["max_tokens"], 500)
        self.assertEqual(kwargs["json"]["temperature"], 0.7)
        self.assertEqual(kwargs["json"]["messages"], self.messages)

    @patch("rksd_assistant.app.generate.requests.post")
    def test_error_status_raises(self, mock_post):
        mock_post.return_value = groq_response(None, status_code=429)
        with self.assertRaises(GenerationError):
            self.client.generate_answer(self.messages)

    @patch("rksd_assistant.app.generate.requests.post")
    def test_transport_error_raises(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("offline")
        with self.assertRaises(GenerationError):
            self.client.generate_answer(self.messages)

    @patch("rksd_assistant.app.generate.requests.post")
    def test_empty_answer_raises(self, mock_post):
        mock_post.return_value = groq_response("")
        with self.assertRaises(GenerationError):
            self.client.generate_answer(self.messages)

    @patch("rksd_assistant.app.generate.requests.post")
    def test_missing_key_skips_call(self, mock_post):
        client = GenerationClient(api_key="")
        with self.assertRaises(GenerationError):
            client.generate_answer(self.messages)
        mock_post.assert_not_called()


class TestFallbackReply(unittest.TestCase):
    def test_greetings(self):
        for message in ("hello", "Hi there", "hlo bhai"):
            self.assertIn("How can I help you with college information today?", fallback_reply(message))

    def test_greeting_needs_whole_word(self):
        self.assertIn('question about "which course is best"', fallback_reply("which course is best"))

    def test_hostel_and_admission(self):
        self.assertIn("hostel office", fallback_reply("Hostel timing kya hai?"))
        self.assertIn("admission office", fallback_reply("Admission kab shuru hoga?"))

    def test_default_quotes_question(self):
        reply = fallback_reply("library ka time")
        self.assertTrue(reply.startswith('Thank you for your question about "library ka time".'))


class TestChatController(unittest.TestCase):
    def setUp(self):
        self.storage = MemStorage()
        self.gen_client = Mock()
        self.controller = ChatController(self.storage, gen_client=self.gen_client)

    def test_stores_both_turns(self):
        self.gen_client.generate_answer.return_value = "Namaste! Main RK hoon."
        reply = self.controller.handle_ask("Namaste", "hi")

        self.assertEqual(reply.content, "Namaste! Main RK hoon.")
        messages = self.storage.get_chat_messages()
        self.assertEqual([(m.role, m.content) for m in messages],
                         [(MessageRole.user, "Namaste"), (MessageRole.assistant, "Namaste! Main RK hoon.")])
        self.assertTrue(all(m.language == "hi" for m in messages))
        self.assertEqual(messages[-1].id, reply.id)

    def test_prompt_uses_fact_store(self):
        self.gen_client.generate_answer.return_value = "ok"
        self.controller.handle_ask("hostel?")
        messages = self.gen_client.generate_answer.call_args[0][0]
        self.assertIn("Hostel Timings: Boys hostel timing is 10:00 PM", messages[0]["content"])

    def test_language_defaults_to_english(self):
        self.gen_client.generate_answer.return_value = "ok"
        reply = self.controller.handle_ask("hello")
        self.assertEqual(reply.language, "en")

    def test_generation_failure_uses_canned_reply(self):
        self.gen_client.generate_answer.side_effect = GenerationError("down")
        reply = self.controller.handle_ask("Hostel ka time?")
        self.assertIn("hostel office", reply.content)
        self.assertEqual(self.storage.get_chat_messages()[-1].content, reply.content)

    def test_storage_failure_returns_technical_difficulties(self):
        storage = Mock(spec=Storage)
        storage.create_chat_message.side_effect = [
            StorageError("down"),
            ChatMessage(id="m1", content=TECHNICAL_DIFFICULTIES_REPLY, role="assistant", language="en"),
        ]
        reply = ChatController(storage, gen_client=self.gen_client).handle_ask("hello")
        self.assertEqual(reply.content, TECHNICAL_DIFFICULTIES_REPLY)
        self.gen_client.generate_answer.assert_not_called()

    def test_storage_failure_twice_propagates(self):
        storage = Mock(spec=Storage)
        storage.create_chat_message.side_effect = StorageError("down")
        with self.assertRaises(StorageError):
            ChatController(storage, gen_client=self.gen_client).handle_ask("hello")


if __name__ == "__main__":
    unittest.main()
