from __future__ import annotations

import structlog

from .repository import Directory

logger = structlog.get_logger(__name__)


class DepartmentTreeWalker:
    """Expand a department into itself plus every descendant (pre-order, depth first)."""

    def __init__(self, directory: Directory):
        self._directory = directory

    def expand(self, department_id: int) -> list[int]:
        ordered: list[int] = []
        visited: set[int] = set()
        stack = [int(department_id)]

        while stack:
            current = stack.pop()
            if current in visited:
                logger.warning("department_already_visited", department_id=current, root_id=department_id)
                continue
            visited.add(current)
            ordered.append(current)
            # Reversed so children are visited in the order the directory returns them.
            children = [int(c) for c in self._directory.list_child_department_ids(current)]
            stack.extend(reversed(children))

        return ordered
