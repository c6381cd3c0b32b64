"""Runtime: the Model engine, collections and logging setup."""

from modelkit.runtime.collection import Collection
from modelkit.runtime.model import Model, getter, setter

__all__ = ["Model", "Collection", "setter", "getter"]
