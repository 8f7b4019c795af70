from shopcart.repositories.base import SoftDeleteRepository, atomic, utcnow

__all__ = ["SoftDeleteRepository", "atomic", "utcnow"]
