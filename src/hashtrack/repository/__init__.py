from .digest_repository import DigestRepository

__all__ = ["DigestRepository"]
