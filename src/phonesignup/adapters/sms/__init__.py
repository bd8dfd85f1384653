"""SMS adapters - Message delivery."""

from .console import ConsoleSmsGateway

__all__ = ["ConsoleSmsGateway"]
