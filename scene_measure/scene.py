"""
Граница с графом сцены.

Движок аннотаций не рисует сам: он только добавляет и удаляет объекты
в сцене хоста. SceneLike — минимальный контракт, SceneGraph — его
реализация в памяти для тестов и безголовых хостов.
"""

import logging
from typing import Any, List, Protocol

logger = logging.getLogger(__name__)


class SceneLike(Protocol):
    """Сцена хоста: принимает и отдаёт объекты-примитивы."""

    def add(self, obj: Any) -> None:
        ...

    def remove(self, obj: Any) -> None:
        ...


class SceneGraph:
    """Упорядоченный список объектов сцены."""

    def __init__(self):
        self.children: List[Any] = []

    def add(self, obj: Any) -> None:
        if any(child is obj for child in self.children):
            return
        self.children.append(obj)

    def remove(self, obj: Any) -> None:
        for i, child in enumerate(self.children):
            if child is obj:
                del self.children[i]
                return
        logger.debug("remove() for object not in scene: %r", obj)

    def __contains__(self, obj: Any) -> bool:
        return any(child is obj for child in self.children)

    def __len__(self) -> int:
        return len(self.children)
