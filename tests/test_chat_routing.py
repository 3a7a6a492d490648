#!/usr/bin/env python3
"""
Tests for message validation, routing and the conversation window.

No network access: the RAG and conversation agents are mocks or run on
mocked generation clients.

USAGE:
    python -m pytest tests/test_chat_routing.py -v
"""

import unittest
from unittest.mock import MagicMock

from healthbot.agents.conversation_agent import EMPTY_REPLY, ConversationAgent
from healthbot.agents.static_agent import StaticAgent
from healthbot.app.controller import Controller
from healthbot.app.errors import EmptyMessage, GenerationError, MessageTooLong
from healthbot.app.postprocess import Postprocessor
from healthbot.app.preprocess import Preprocessor
from healthbot.app.prompt_builder import HEALTH_SYSTEM_PROMPT
from healthbot.app.session import ConversationHistory
from healthbot.nlu.rules import GENERIC_TOPIC, match_static_topic
from healthbot.schemas.io_models import ChatAnswer


def _agent(name, provider="openai", message="agent answer"):
    agent = MagicMock()
    agent.name = name
    agent.provider = provider
    agent.handle.return_value = ChatAnswer(agent=name, message=message, provider=provider)
    return agent


class TestPreprocessor(unittest.TestCase):

    def setUp(self):
        self.pre = Preprocessor()

    def test_length_boundary(self):
        self.assertEqual(self.pre.validate_message("a" * 1000), "a" * 1000)
        with self.assertRaises(MessageTooLong) as ctx:
            self.pre.validate_message("a" * 1001)
        self.assertEqual(ctx.exception.status_code, 400)

    def test_empty_messages(self):
        for message in ["", "   ", "\n\t", None, 42, ["hi"]]:
            with self.subTest(message=message):
                with self.assertRaises(EmptyMessage) as ctx:
                    self.pre.validate_message(message)
                self.assertEqual(ctx.exception.message, "Please provide a valid message")

    def test_normalize_text(self):
        self.assertEqual(self.pre.normalize_text("  My   HEADACHE\nhurts "), "my headache hurts")
        self.assertEqual(self.pre.normalize_text(""), "")


class TestStaticTopics(unittest.TestCase):

    def test_keywords_match_case_insensitively(self):
        self.assertEqual(match_static_topic("I have a HEADACHE").keyword, "headache")
        self.assertEqual(match_static_topic("fever since yesterday").keyword, "fever")
        self.assertEqual(match_static_topic("Best exercise routine?").keyword, "exercise")
        self.assertEqual(match_static_topic("keto diet?").keyword, "diet")

    def test_first_topic_wins(self):
        self.assertEqual(match_static_topic("fever and headache").keyword, "headache")

    def test_no_topic(self):
        self.assertIsNone(match_static_topic("How much sleep do I need?"))

    def test_static_agent_answers(self):
        agent = StaticAgent()
        answer = agent.handle("I have a headache")
        self.assertEqual(answer.image_search_term, "headache relief techniques")
        self.assertEqual(answer.provider, "fallback")
        self.assertIn("qualified healthcare professional", answer.message)

        generic = agent.handle("Tell me about sleep")
        self.assertEqual(generic.message, GENERIC_TOPIC.message)
        self.assertEqual(generic.image_search_term, "healthcare consultation doctor patient")


class TestControllerRouting(unittest.TestCase):

    def setUp(self):
        self.rag = _agent("rag")
        self.conversation = _agent("conversation")
        self.controller = Controller(rag_agent=self.rag, conversation_agent=self.conversation)

    def test_keyword_goes_to_static_without_external_calls(self):
        answer = self.controller.handle_query("I have a headache")
        self.assertEqual(answer.agent, "static")
        self.assertEqual(answer.image_search_term, "headache relief techniques")
        self.rag.handle.assert_not_called()
        self.conversation.handle.assert_not_called()

    def test_other_questions_go_to_rag(self):
        answer = self.controller.handle_query("What is hypertension?")
        self.assertEqual(answer.agent, "rag")
        self.rag.handle.assert_called_once()
        self.conversation.handle.assert_not_called()

    def test_conversation_when_no_vector_store(self):
        controller = Controller(conversation_agent=self.conversation)
        self.assertEqual(controller.handle_query("What is hypertension?").agent, "conversation")

    def test_static_generic_when_nothing_configured(self):
        controller = Controller()
        answer = controller.handle_query("What is hypertension?")
        self.assertEqual(answer.agent, "static")
        self.assertEqual(answer.message, GENERIC_TOPIC.message)
        self.assertEqual(controller.status(),
                         {"aiAvailable": False, "provider": "fallback", "status": "operational"})

    def test_status_with_ai(self):
        self.assertEqual(self.controller.status(),
                         {"aiAvailable": True, "provider": "openai", "status": "operational"})

    def test_invalid_message_never_reaches_agents(self):
        with self.assertRaises(MessageTooLong):
            self.controller.handle_query("x" * 1001)
        with self.assertRaises(EmptyMessage):
            self.controller.handle_query("   ")
        self.rag.handle.assert_not_called()

    def test_history_is_normalized_and_windowed(self):
        payload = [{"role": "user", "content": f"m{i}"} for i in range(25)]
        payload.insert(3, {"role": "hacker", "content": "x"})
        payload.insert(5, "not a message")
        self.controller.handle_query("What is hypertension?", payload)

        _, kwargs = self.rag.handle.call_args
        history = kwargs["history"]
        self.assertEqual(len(history), 20)
        self.assertEqual(history[0]["content"], "m5")
        self.assertEqual(history[-1]["content"], "m24")

    def test_garbage_history_is_ignored(self):
        self.controller.handle_query("What is hypertension?", "not a list")
        _, kwargs = self.rag.handle.call_args
        self.assertEqual(kwargs["history"], [])

    def test_agent_failure_propagates(self):
        self.rag.handle.side_effect = GenerationError(detail="boom")
        with self.assertRaises(GenerationError):
            self.controller.handle_query("What is hypertension?")


class TestConversationHistory(unittest.TestCase):

    def test_keeps_last_twenty_messages(self):
        history = ConversationHistory()
        for i in range(11):
            history.add_exchange(f"q{i}", f"a{i}")
        self.assertEqual(len(history), 20)
        self.assertEqual(history.as_list()[0], {"role": "user", "content": "q1"})
        self.assertEqual(history.as_list()[-1], {"role": "assistant", "content": "a10"})

    def test_recent(self):
        history = ConversationHistory(messages=[{"role": "user", "content": str(i)} for i in range(15)])
        self.assertEqual([m["content"] for m in history.recent(10)], [str(i) for i in range(5, 15)])
        self.assertEqual(history.recent(0), [])

    def test_copies_are_returned(self):
        history = ConversationHistory()
        history.add_message("user", "hi")
        history.as_list()[0]["content"] = "changed"
        self.assertEqual(history.as_list()[0]["content"], "hi")

    def test_unknown_role(self):
        with self.assertRaises(ValueError):
            ConversationHistory().add_message("robot", "beep")

    def test_clear(self):
        history = ConversationHistory()
        history.add_exchange("q", "a")
        history.clear()
        self.assertEqual(len(history), 0)


class TestPostprocessor(unittest.TestCase):

    def setUp(self):
        self.post = Postprocessor()

    def test_extracts_and_strips_tag(self):
        text, term = self.post.extract_image_suggestion(
            "Stretch daily. [IMAGE_SUGGESTION: neck stretches] It helps."
        )
        self.assertEqual(term, "neck stretches")
        self.assertNotIn("IMAGE_SUGGESTION", text)
        self.assertTrue(text.startswith("Stretch daily."))

    def test_first_of_many_tags(self):
        text, term = self.post.extract_image_suggestion("[IMAGE_SUGGESTION: a] x [IMAGE_SUGGESTION: b]")
        self.assertEqual(term, "a")
        self.assertEqual(text, "x")

    def test_no_tag(self):
        self.assertEqual(self.post.extract_image_suggestion("Plain answer"), ("Plain answer", None))


class TestConversationAgent(unittest.TestCase):

    def setUp(self):
        self.gen = MagicMock()
        self.agent = ConversationAgent(self.gen, context_messages=10, temperature=0.7, max_tokens=500)

    def test_prompt_has_persona_recent_history_and_message(self):
        self.gen.generate.return_value = "Drink water. [IMAGE_SUGGESTION: glass of water]"
        history = [{"role": "user", "content": f"m{i}"} for i in range(14)]

        answer = self.agent.handle("How much water?", history=history)

        args, kwargs = self.gen.generate.call_args
        messages = args[0]
        self.assertEqual(messages[0], {"role": "system", "content": HEALTH_SYSTEM_PROMPT})
        self.assertEqual([m["content"] for m in messages[1:-1]], [f"m{i}" for i in range(4, 14)])
        self.assertEqual(messages[-1], {"role": "user", "content": "How much water?"})
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertEqual(kwargs["max_tokens"], 500)
        self.assertEqual(kwargs["presence_penalty"], 0.1)
        self.assertEqual(kwargs["frequency_penalty"], 0.1)

        self.assertEqual(answer.message, "Drink water.")
        self.assertEqual(answer.image_search_term, "glass of water")
        self.assertEqual(answer.provider, "openai")

    def test_empty_reply(self):
        self.gen.generate.return_value = ""
        answer = self.agent.handle("Hello")
        self.assertEqual(answer.message, EMPTY_REPLY)
        self.assertIsNone(answer.image_search_term)


if __name__ == '__main__':
    unittest.main()
