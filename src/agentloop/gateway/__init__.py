from agentloop.gateway.openai import OpenAIChatGateway
from agentloop.gateway.protocol import ModelGateway

__all__ = [
    "ModelGateway",
    "OpenAIChatGateway",
]
