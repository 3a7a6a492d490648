#!/usr/bin/env python3
"""
Prompt builder module for the health chatbot.

This module constructs chat messages for the LLM: grounded prompts for the
retrieval path and persona prompts for the conversational path.
"""

from typing import Dict, List

from ..schemas.io_models import RetrievedMatch

NOT_FOUND_PHRASE = "I don't know."
CONTEXT_DELIMITER = "\n---\n"

GROUNDED_SYSTEM_PROMPT = f"""You are a health information assistant for HealthCare+.
Answer the user's question using ONLY the information in the Context section.

RULES:
- Do not use outside knowledge, do not guess, and do not extrapolate beyond the Context.
- If the Context is empty or does not contain the answer, reply with exactly: "{NOT_FOUND_PHRASE}"
- Keep answers short, clear, and factual.
- Never provide a diagnosis or a treatment plan."""

HEALTH_SYSTEM_PROMPT = """You are a knowledgeable and compassionate health assistant for HealthCare+, a medical information app. Your role is to provide helpful, accurate, and easy-to-understand health information while maintaining appropriate medical disclaimers.

Guidelines:
1. Always provide helpful, evidence-based health information
2. Be empathetic and supportive in your responses
3. Include relevant disclaimers when appropriate
4. Suggest consulting healthcare professionals for specific medical concerns
5. Focus on general wellness, prevention, and health education
6. Never provide specific medical diagnoses or treatment recommendations
7. If asked about serious symptoms, encourage seeking immediate medical attention
8. Keep responses informative but concise (2-3 paragraphs max)
9. Use a warm, professional tone suitable for a health app
10. When appropriate, suggest lifestyle improvements and general wellness tips

Important: Always end responses about specific symptoms or medical concerns with: "Please consult with a qualified healthcare professional for personalized medical advice."

You can suggest when images might be helpful by including [IMAGE_SUGGESTION: brief description] in your response, but don't assume images will always be shown."""

class PromptBuilder:
    """Builds LLM message lists with context and conversation history."""

    def __init__(self, grounded_prompt: str = GROUNDED_SYSTEM_PROMPT,
                 persona_prompt: str = HEALTH_SYSTEM_PROMPT):
        """Initialize the prompt builder."""
        self.grounded_prompt = grounded_prompt
        self.persona_prompt = persona_prompt

    def build_context(self, matches: List[RetrievedMatch]) -> str:
        """Join match contents into one context block; empty string when there are none."""
        return CONTEXT_DELIMITER.join(m.content for m in matches if m.content)

    def build_rag_messages(self, question: str, context: str) -> List[Dict[str, str]]:
        """
        Build a grounded prompt for the retrieval path.

        Args:
            question: User question
            context: Context block from ``build_context`` (may be empty)

        Returns:
            System + user messages
        """
        user_prompt = f"Context:\n{context}\n\nQuestion: {question}"
        return [
            {"role": "system", "content": self.grounded_prompt},
            {"role": "user", "content": user_prompt},
        ]

    def build_conversation_messages(self, message: str,
                                    history: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """Persona prompt, then prior turns, then the new user message."""
        return [
            {"role": "system", "content": self.persona_prompt},
            *history,
            {"role": "user", "content": message},
        ]
