"""
Closure of group dependencies.

Every sequence or choice particle gets one GroupChildSet. While the schema is
walked, elements found directly inside a group are recorded immediately and
nested groups are recorded as dependencies, because a nested group may be part
of a cycle that is still being walked. Once the walk is complete,
close_group_dependencies() merges the children of resolved groups into the
groups depending on them until nothing is left, or reports a cycle.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Set, Union

from xsd2codemirror.common import CycleError, dedupe
from xsd2codemirror.constants import MAX_CLOSURE_ROUNDS
from xsd2codemirror.simplexml import QualifiedName

logger = logging.getLogger(__name__)


class GroupSlot(NamedTuple):
    """Placeholder for the children of a dependency, at its declaration position."""
    key: int


class GroupChildSet:
    """ The children contributed by one sequence or choice particle. """

    def __init__(self, key: int, group: Any):
        self.key = key
        self.group = group
        self.members: List[Union[QualifiedName, GroupSlot]] = []
        self.dependencies: Set[int] = set()
        self.closed = False
        self._children: List[QualifiedName] = []

    def __repr__(self) -> str:
        return f'GroupChildSet(key={self.key}, dependencies={sorted(self.dependencies)}, closed={self.closed})'

    @property
    def is_resolved(self) -> bool:
        return self.closed

    @property
    def children(self) -> List[QualifiedName]:
        if not self.closed:
            raise RuntimeError(f'{self!r} still has unresolved dependencies')
        return self._children

    def add_child(self, name: QualifiedName):
        self._check_open()
        self.members.append(name)

    def add_dependency(self, other: 'GroupChildSet'):
        self._check_open()
        if other.key not in self.dependencies:
            self.dependencies.add(other.key)
            self.members.append(GroupSlot(other.key))

    def absorb(self, dependency: 'GroupChildSet'):
        """ Replace the slot of a resolved dependency with its children. """
        self._check_open()
        slot = GroupSlot(dependency.key)
        index = self.members.index(slot)
        self.members[index:index + 1] = dependency.children
        self.dependencies.discard(dependency.key)

    def close(self):
        if self.dependencies:
            raise RuntimeError(f'{self!r} cannot be closed')
        self._children = dedupe(m for m in self.members if not isinstance(m, GroupSlot))
        self.closed = True

    def _check_open(self):
        if self.closed:
            raise RuntimeError(f'{self!r} is already resolved')


class GroupCache:
    """
    Arena of GroupChildSets for one resolution pass. Group particles are
    identified by object identity and addressed by a stable integer key.
    """

    def __init__(self):
        self._keys: Dict[int, int] = {}
        self._sets: List[GroupChildSet] = []

    def __len__(self) -> int:
        return len(self._sets)

    def __iter__(self) -> Iterator[GroupChildSet]:
        return iter(self._sets)

    def __getitem__(self, key: int) -> GroupChildSet:
        return self._sets[key]

    def get(self, group: Any) -> Optional[GroupChildSet]:
        key = self._keys.get(id(group))
        return None if key is None else self._sets[key]

    def create(self, group: Any) -> GroupChildSet:
        if id(group) in self._keys:
            raise KeyError(f'group {group!r} is already cached')
        group_set = GroupChildSet(len(self._sets), group)
        self._keys[id(group)] = group_set.key
        self._sets.append(group_set)
        return group_set


def close_group_dependencies(cache: GroupCache,
                             describe: Callable[[Any], str] = repr,
                             max_rounds: int = MAX_CLOSURE_ROUNDS):
    """
    Resolve all deferred group dependencies in the cache.

    Works as a worklist: sets without dependencies are closed first; each round
    then visits only the sets depending on something closed in the previous
    round, lowest remaining dependency count first, and absorbs what is
    resolved. A finite acyclic schema closes in as many rounds as its deepest
    group nesting. Sets still unresolved when the worklist runs dry, or when
    max_rounds is exhausted, are reported with CycleError.

    Args:
        cache: The group cache of the current resolution pass.
        describe: Renders a group particle for the error message.
        max_rounds: Upper bound on the number of rounds.
    """
    dependents: Dict[int, List[int]] = defaultdict(list)
    for group_set in cache:
        for key in group_set.dependencies:
            dependents[key].append(group_set.key)

    ready = [group_set for group_set in cache if not group_set.dependencies and not group_set.closed]
    for group_set in ready:
        group_set.close()

    rounds = 0
    while ready:
        if rounds >= max_rounds:
            logger.warning("Dependency closure stopped after %d rounds", rounds)
            break
        rounds += 1
        affected = [cache[key] for key in dedupe(k for g in ready for k in dependents[g.key])]
        affected = [group_set for group_set in affected if not group_set.closed]
        affected.sort(key=lambda g: len(g.dependencies))
        logger.debug("Closure round %d: %d group(s) to update", rounds, len(affected))
        ready = []
        for group_set in affected:
            if group_set.closed:
                continue
            for key in sorted(group_set.dependencies):
                if cache[key].closed:
                    group_set.absorb(cache[key])
            if not group_set.dependencies:
                group_set.close()
                ready.append(group_set)

    unresolved = [group_set for group_set in cache if not group_set.closed]
    if unresolved:
        raise CycleError([describe(group_set.group) for group_set in unresolved])
