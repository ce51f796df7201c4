from gemini_gateway.models.openai import ChatCompletionRequest, EmbeddingRequest

__all__ = ["ChatCompletionRequest", "EmbeddingRequest"]
