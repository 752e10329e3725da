"""Dependency graph over a task collection."""

from collections.abc import Iterable, Sequence

from paveplan.exceptions import (
    CircularDependencyError,
    MissingReferenceError,
    SelfDependencyError,
    ValidationError,
)
from paveplan.models import Task, TaskId


class DependencyGraph:
    """Adjacency view of task dependencies in both directions.

    ``requires[t]`` lists the tasks ``t`` waits on; ``dependents[d]`` lists the
    tasks waiting on ``d``. Task order follows the input order so that every
    traversal is deterministic.

    Raises:
        ValidationError: If two tasks share an ID
    """

    def __init__(self, tasks: Sequence[Task]):
        self.order: list[TaskId] = [task.id for task in tasks]
        seen: set[TaskId] = set()
        for task_id in self.order:
            if task_id in seen:
                raise ValidationError(f"Duplicate task ID: {task_id!r}")
            seen.add(task_id)

        self.requires: dict[TaskId, list[TaskId]] = {}
        self.dependents: dict[TaskId, list[TaskId]] = {task_id: [] for task_id in self.order}

        for task in tasks:
            unique_deps = list(dict.fromkeys(task.dependencies))
            self.requires[task.id] = unique_deps
            for dep_id in unique_deps:
                if dep_id in self.dependents:
                    self.dependents[dep_id].append(task.id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.requires

    def edges(self) -> list[tuple[TaskId, TaskId]]:
        """All ``(dependency, dependent)`` pairs."""
        return [(dep_id, task_id) for task_id in self.order for dep_id in self.requires[task_id]]

    def check_references(self) -> None:
        """Reject self-dependencies and dependencies on unknown tasks.

        Raises:
            SelfDependencyError: If a task lists itself
            MissingReferenceError: If a task lists an ID not in the collection
        """
        for task_id in self.order:
            for dep_id in self.requires[task_id]:
                if dep_id == task_id:
                    raise SelfDependencyError(f"Task {task_id!r} cannot depend on itself")
                if dep_id not in self.requires:
                    raise MissingReferenceError(
                        f"Task {task_id!r} depends on unknown task: {dep_id!r}"
                    )

    def topological_order(self) -> list[TaskId]:
        """Order tasks so every dependency precedes its dependents.

        Uses Kahn's algorithm, taking ready tasks in input order.

        Raises:
            CircularDependencyError: If the dependencies contain a cycle
        """
        in_degree = {
            task_id: sum(1 for dep_id in deps if dep_id in self.requires)
            for task_id, deps in self.requires.items()
        }
        queue: list[TaskId] = [task_id for task_id in self.order if in_degree[task_id] == 0]
        result: list[TaskId] = []

        while queue:
            task_id = queue.pop(0)
            result.append(task_id)
            for dependent_id in self.dependents[task_id]:
                in_degree[dependent_id] -= 1
                if in_degree[dependent_id] == 0:
                    queue.append(dependent_id)

        if len(result) != len(self.order):
            cycle = self.find_cycle()
            raise CircularDependencyError(
                "Circular dependency detected: " + " -> ".join(str(t) for t in cycle)
            )

        return result

    def find_cycle(self) -> list[TaskId]:
        """Return one dependency cycle as a closed path, or [] if acyclic."""
        visited: set[TaskId] = set()
        for start_id in self.order:
            path: list[TaskId] = []
            if self._walk(start_id, visited, path):
                closing = path[-1]
                return path[path.index(closing) :]
        return []

    def _walk(self, task_id: TaskId, visited: set[TaskId], path: list[TaskId]) -> bool:
        """Depth-first search leaving the cycle (closed) at the end of ``path``."""
        if task_id in path:
            path.append(task_id)
            return True
        if task_id in visited:
            return False

        visited.add(task_id)
        path.append(task_id)
        for dep_id in self.requires.get(task_id, []):
            if self._walk(dep_id, visited, path):
                return True
        path.pop()
        return False

    def with_dependencies(
        self, task_id: TaskId, dependency_ids: Iterable[TaskId]
    ) -> "DependencyGraph":
        """Copy of this graph with one task's dependencies replaced."""
        clone = DependencyGraph([])
        clone.order = list(self.order)
        clone.requires = {tid: list(deps) for tid, deps in self.requires.items()}
        clone.requires[task_id] = list(dict.fromkeys(dependency_ids))
        clone.dependents = {tid: [] for tid in clone.order}
        for tid in clone.order:
            for dep_id in clone.requires[tid]:
                if dep_id in clone.dependents:
                    clone.dependents[dep_id].append(tid)
        return clone
