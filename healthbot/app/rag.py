#!/usr/bin/env python3
"""
Retrieval-augmented generation pipeline.

Stages run in a fixed order, once each per question:
embed -> similarity search -> context -> grounded prompt -> generate.
Any stage failure propagates; there is no partial answer and no caching.
"""

from typing import Optional

from .config import Config
from .embed import EmbeddingClient
from .generate import GenerationClient
from .prompt_builder import PromptBuilder
from .retrieval import VectorRetriever
from ..schemas.io_models import RAGAnswer
from ..utils.logger import get_logger

logger = get_logger()

class RAGPipeline:
    def __init__(self, embed_client: EmbeddingClient, retriever: VectorRetriever,
                 gen_client: GenerationClient, prompt_builder: Optional[PromptBuilder] = None,
                 threshold: float = Config.MATCH_THRESHOLD, top_k: int = Config.MATCH_COUNT,
                 max_tokens: int = Config.RAG_MAX_TOKENS):
        self.embed_client = embed_client
        self.retriever = retriever
        self.gen_client = gen_client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.threshold = threshold
        self.top_k = top_k
        self.max_tokens = max_tokens

    def answer(self, question: str) -> RAGAnswer:
        logger.info("[WORKFLOW] RAG 1. Embedding question...")
        embedding = self.embed_client.generate_embedding(question)

        logger.info("[WORKFLOW] RAG 2. Searching vector store...")
        matches = self.retriever.search(embedding, threshold=self.threshold, top_k=self.top_k)

        # An empty context still goes to the model; the prompt tells it to say it doesn't know
        context = self.prompt_builder.build_context(matches)
        logger.info(f"[WORKFLOW] RAG 3. Context built from {len(matches)} matches ({len(context)} chars)")

        messages = self.prompt_builder.build_rag_messages(question, context)

        logger.info("[WORKFLOW] RAG 4. Generating grounded answer...")
        answer = self.gen_client.generate(messages, temperature=0, max_tokens=self.max_tokens)

        return RAGAnswer(answer=answer, matches=matches)
