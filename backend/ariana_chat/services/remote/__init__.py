"""Remote conversation client factory."""

from ariana_chat.services.remote.base import BaseConversationClient


def get_conversation_client() -> BaseConversationClient:
    """Returns the client for the configured prediction endpoint."""
    from ariana_chat.services.remote.prediction import PredictionClient
    return PredictionClient()
