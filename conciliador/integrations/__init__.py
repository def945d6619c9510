"""External integrations for the supplier reconciliation system."""

from .chat_model import ChatModelClient, ModelCallError, build_model_client

__all__ = ["ChatModelClient", "ModelCallError", "build_model_client"]
