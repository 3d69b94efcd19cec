from contextlib import contextmanager
from typing import Any, Iterator, Type, TypeVar, Generic, Iterable, Optional

from django.db import DatabaseError, models

from apps.api.exceptions import StoreFailure

from .logger import AppLogger, get_logger

T = TypeVar('T', bound=models.Model)

_logger = get_logger(__name__).bind(component='common', layer='repository')


class GenericRepository(Generic[T]):
    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        return self.model.objects.filter(**filters)

    def exists(self, **filters) -> bool:
        return self.model.objects.filter(**filters).exists()

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def delete(self, obj: T):
        obj.delete()


@contextmanager
def store_errors(
    operation: str, log: Optional[AppLogger] = None, **context: Any
) -> Iterator[None]:
    """Translate database errors raised inside the block into ``StoreFailure``.

    Application errors pass through untouched; nothing is retried.
    """
    try:
        yield
    except DatabaseError as exc:
        (log or _logger).exception(
            'Store operation failed', operation=operation, error=str(exc), **context
        )
        raise StoreFailure(operation, exc) from exc
