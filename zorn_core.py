"""
zorn_core.py

Core data structures and operations for maximal chains, Zorn's lemma and
order extension over finite posets.

This module implements the constructive side of Zorn's lemma:
- Relations are finite, explicit binary relations (usable as posets)
- Chains are frozensets of pairwise comparable elements
- A closure family of chains is grown from the empty chain by a successor
  operator and by unions; its union is a maximal chain (Hausdorff)
- Zorn's lemma turns an upper bound of that chain into a maximal element
- Order extension runs Zorn over the partial orders extending a relation

Only finite carriers are handled. For an infinite carrier the closure family
is a transfinite construction that only exists by the axiom of choice;
ClosureFamily gives up with an error once it exceeds max_steps.
"""

import sys
import random
from functools import reduce, lru_cache
from itertools import combinations
import networkx as nx
from tqdm import tqdm


# ============================================================================
# SECTION 0: ERRORS
# ============================================================================

class ZornError(ValueError):
    """Base class for precondition failures in the maximal-chain machinery."""


class EmptyCarrierError(ZornError):
    """The poset has no elements, so it has no maximal element."""


class UnboundedChainError(ZornError):
    """A chain has no upper bound, or the supplied bound is not one."""

    def __init__(self, message, chain=None):
        super().__init__(message)
        self.chain = chain


class NotMaximalError(ZornError):
    """Something lies strictly above the element produced by Zorn's lemma."""


class NotAPartialOrderError(ZornError):
    """A relation required to be a partial order is not one."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("Relation is not a partial order: " + "; ".join(self.errors))


class SuccessorError(ZornError):
    """A successor strategy returned something other than a strict superchain."""


class ClosureInvariantError(ZornError):
    """The chain closure family lost totality, its fixpoint, or did not stabilise."""


# ============================================================================
# SECTION 1: RELATIONS
# ============================================================================

class Relation:
    """
    A finite binary relation R on a carrier of hashable elements.

    The relation is stored as element -> set of elements above it, so
    holds(a, b) is an O(1) lookup. The carrier keeps its input order; that
    order is only used to make choices deterministic (first incomparable
    pair, first extension of a chain, ...).

    Relations are values: they are never mutated after construction, they are
    hashable, and two relations are equal when they have the same carrier set
    and the same pairs. This lets a relation be an element of another poset
    (see ExtensionPoset). r1 <= r2 is pointwise implication.

    A Relation also acts as a poset for the chain machinery: it provides
    leq, comparable, elements, is_empty, strict_upper and default_successor.
    """

    def __init__(self, carrier, pairs=()):
        """
        Create a relation.

        Args:
            carrier: iterable of hashable elements (duplicates are dropped)
            pairs: iterable of (a, b) pairs meaning R a b

        Raises:
            ValueError: if a pair mentions an element outside the carrier
        """
        self._carrier = tuple(dict.fromkeys(carrier))
        self._elements = frozenset(self._carrier)
        self._above = {x: set() for x in self._carrier}
        self._hash = None

        for (a, b) in pairs:
            if a not in self._elements:
                raise ValueError(f"Unknown element in relation: {a}")
            if b not in self._elements:
                raise ValueError(f"Unknown element in relation: {b}")
            self._above[a].add(b)

        self._pairs = frozenset(
            (a, b) for a in self._carrier for b in self._above[a]
        )

    @classmethod
    def from_function(cls, carrier, fn):
        """
        Build a relation from a predicate.

        Args:
            carrier: iterable of elements
            fn: callable (a, b) -> bool

        Returns:
            Relation containing (a, b) exactly when fn(a, b) is true
        """
        carrier = tuple(dict.fromkeys(carrier))
        return cls(carrier, [(a, b) for a in carrier for b in carrier if fn(a, b)])

    @classmethod
    def from_sequence(cls, sequence, carrier=None):
        """
        Build the total order listing elements from smallest to largest.

        Args:
            sequence: elements in increasing order
            carrier: optional carrier ordering to keep (defaults to sequence)

        Returns:
            Relation with (seq[i], seq[j]) for all i <= j
        """
        sequence = list(sequence)
        pairs = [(sequence[i], sequence[j])
                 for i in range(len(sequence))
                 for j in range(i, len(sequence))]
        return cls(sequence if carrier is None else carrier, pairs)

    @classmethod
    def from_graph(cls, graph, reflexive=True):
        """
        Build a relation from a NetworkX DiGraph (edge a -> b means R a b).

        Args:
            graph: NetworkX DiGraph
            reflexive: also relate every node to itself

        Returns:
            Relation (call closure() to make it transitive)
        """
        pairs = list(graph.edges())
        if reflexive:
            pairs.extend((x, x) for x in graph.nodes())
        return cls(graph.nodes(), pairs)

    @property
    def carrier(self):
        """Tuple of elements in input order."""
        return self._carrier

    @property
    def pairs(self):
        """Frozenset of all (a, b) with R a b."""
        return self._pairs

    def holds(self, a, b):
        """Return True if R a b."""
        return b in self._above.get(a, ())

    def leq(self, a, b):
        """Return True if a ≤ b (same as holds)."""
        return b in self._above.get(a, ())

    def lt(self, a, b):
        """Return True if a < b: a ≤ b but not b ≤ a."""
        return self.leq(a, b) and not self.leq(b, a)

    def comparable(self, a, b):
        """Return True if a = b, a ≤ b or b ≤ a."""
        return a == b or self.leq(a, b) or self.leq(b, a)

    def elements(self):
        """Iterate over the carrier in input order."""
        return iter(self._carrier)

    def is_empty(self):
        return not self._carrier

    def __contains__(self, x):
        return x in self._elements

    def up_set(self, a):
        """Return the set of elements b with a ≤ b."""
        return set(self._above[a])

    def down_set(self, b):
        """Return the set of elements a with a ≤ b."""
        return {a for a in self._carrier if b in self._above[a]}

    def is_reflexive(self):
        return all(self.holds(a, a) for a in self._carrier)

    def is_transitive(self):
        for a in self._carrier:
            for b in self._above[a]:
                if not self._above[b] <= self._above[a]:
                    return False
        return True

    def is_antisymmetric(self):
        return all(a == b or not self.holds(b, a) for (a, b) in self._pairs)

    def is_partial_order(self):
        return self.is_reflexive() and self.is_transitive() and self.is_antisymmetric()

    def is_total(self):
        """Return True if every two elements are comparable."""
        return self.first_incomparable_pair() is None

    def incomparable_pairs(self):
        """Yield (x, y) pairs of incomparable elements, x before y in the carrier."""
        for x, y in combinations(self._carrier, 2):
            if not self.comparable(x, y):
                yield (x, y)

    def first_incomparable_pair(self):
        return next(self.incomparable_pairs(), None)

    def validate(self):
        """
        Check the partial order axioms.

        Returns:
            List of error messages (empty if this is a partial order)
        """
        errors = []

        # Check reflexivity
        for a in self._carrier:
            if not self.holds(a, a):
                errors.append(f"Reflexivity violated: {a} ≰ {a}")

        # Check transitivity
        for a in self._carrier:
            for b in self._carrier:
                if a == b or not self.holds(a, b):
                    continue
                for c in self._above[b]:
                    if not self.holds(a, c):
                        errors.append(f"Transitivity violated: {a} ≤ {b} and {b} ≤ {c} but {a} ≰ {c}")

        # Check antisymmetry
        for a, b in combinations(self._carrier, 2):
            if self.holds(a, b) and self.holds(b, a):
                errors.append(f"Antisymmetry violated: {a} ≤ {b} and {b} ≤ {a}")

        return errors

    def closure(self):
        """
        Return the reflexive-transitive closure (Floyd-Warshall).

        Returns:
            New Relation on the same carrier
        """
        n = len(self._carrier)
        idx = {x: i for i, x in enumerate(self._carrier)}

        # Build reachability matrix
        reach = [[i == j for j in range(n)] for i in range(n)]
        for (a, b) in self._pairs:
            reach[idx[a]][idx[b]] = True

        # Floyd-Warshall
        for k in range(n):
            for i in range(n):
                if not reach[i][k]:
                    continue
                for j in range(n):
                    if reach[k][j]:
                        reach[i][j] = True

        pairs = [(a, b)
                 for i, a in enumerate(self._carrier)
                 for j, b in enumerate(self._carrier)
                 if reach[i][j]]
        return Relation(self._carrier, pairs)

    def restrict(self, subset):
        """Return the relation restricted to subset (carrier order kept)."""
        subset = set(subset)
        carrier = [x for x in self._carrier if x in subset]
        return Relation(carrier, [(a, b) for (a, b) in self._pairs
                                  if a in subset and b in subset])

    def union(self, other):
        """Pointwise union of two relations on the same carrier."""
        self._check_same_carrier(other)
        return Relation(self._carrier, self._pairs | other._pairs)

    def adjoin(self, x, y):
        """
        Force x ≤ y and propagate it transitively.

        Returns s ∪ {(a, b) : a ≤ x and y ≤ b}. When this relation is a
        partial order and x, y are incomparable the result is again a
        partial order, strictly larger than this one.
        """
        below_x = self.down_set(x)
        above_y = self._above[y]
        added = {(a, b) for a in below_x for b in above_y}
        return Relation(self._carrier, self._pairs | added)

    def hasse_edges(self):
        """
        Return edges for the Hasse diagram (covering relations).

        Returns list of (lower, upper) pairs where lower < upper and
        there's no intermediate element.
        """
        edges = []
        for a in self._carrier:
            for b in self._carrier:
                if not self.lt(a, b):
                    continue
                # Check if there's an intermediate element
                is_covering = True
                for c in self._carrier:
                    if c != a and c != b:
                        if self.lt(a, c) and self.lt(c, b):
                            is_covering = False
                            break
                if is_covering:
                    edges.append((a, b))
        return edges

    def to_graph(self):
        """
        Convert to a NetworkX DiGraph.

        Nodes are the carrier; there is an edge a -> b for every pair with
        a != b (loops are left out so a partial order gives a DAG).
        """
        G = nx.DiGraph()
        G.add_nodes_from(self._carrier)
        G.add_edges_from((a, b) for (a, b) in self._pairs if a != b)
        return G

    def as_sequence(self):
        """
        List the elements of a total order from smallest to largest.

        Raises:
            ValueError: if this is not a total partial order
        """
        if not (self.is_partial_order() and self.is_total()):
            raise ValueError("Only a total order can be listed as a sequence")
        return list(nx.topological_sort(self.to_graph()))

    def strict_upper(self, m):
        """Return the first element strictly above m, or None if m is maximal."""
        for a in self._carrier:
            if self.lt(m, a):
                return a
        return None

    def default_successor(self):
        """Successor strategy used when none is passed explicitly."""
        return get_successor_strategy()

    def to_string(self):
        """Comma-separated strict pairs: 'a<b, a<c'."""
        return ", ".join(f"{a}<{b}" for (a, b) in self.sorted_pairs() if a != b)

    def sorted_pairs(self):
        position = {x: i for i, x in enumerate(self._carrier)}
        return sorted(self._pairs, key=lambda p: (position[p[0]], position[p[1]]))

    def _check_same_carrier(self, other):
        if not isinstance(other, Relation):
            raise TypeError(f"Expected Relation, got {type(other)}")
        if self._elements != other._elements:
            raise ValueError("Relations are defined on different carriers")

    def __le__(self, other):
        """Pointwise implication: R a b -> S a b for all a, b."""
        self._check_same_carrier(other)
        return self._pairs <= other._pairs

    def __lt__(self, other):
        self._check_same_carrier(other)
        return self._pairs < other._pairs

    def __eq__(self, other):
        if not isinstance(other, Relation):
            return False
        return self._elements == other._elements and self._pairs == other._pairs

    def __hash__(self):
        if self._hash is None:
            self._hash = hash((self._elements, self._pairs))
        return self._hash

    def __repr__(self):
        return f"Relation({len(self._carrier)} elements, {len(self._pairs)} pairs)"

    def __str__(self):
        return self.to_string()


# ============================================================================
# SECTION 2: CHAINS AND ORDER QUERIES
# ============================================================================

def is_chain(relation, chain):
    """
    Check whether a set is a chain: every two members are comparable.

    The empty set and every singleton are chains, and any subset of a chain
    is a chain.

    Args:
        relation: Relation (or any poset with comparable)
        chain: iterable of elements

    Returns:
        bool
    """
    members = list(chain)
    for i, a in enumerate(members):
        for b in members[i + 1:]:
            if not relation.comparable(a, b):
                return False
    return True


def is_superchain(relation, smaller, larger):
    """Return True if larger is a chain strictly containing smaller."""
    return frozenset(smaller) < frozenset(larger) and is_chain(relation, larger)


def is_max_chain(relation, chain):
    """
    Check that chain is a chain and no element of the carrier extends it.

    Args:
        relation: Relation
        chain: iterable of elements

    Returns:
        bool
    """
    chain = frozenset(chain)
    if not is_chain(relation, chain):
        return False
    for x in relation.elements():
        if x not in chain and all(relation.comparable(x, c) for c in chain):
            return False
    return True


def all_chains(relation):
    """
    Enumerate every chain of a finite relation.

    Exponential in the width of the relation; intended for checking results
    on small examples.

    Returns:
        list of frozensets, the empty chain first
    """
    chains = [frozenset()]
    for x in relation.elements():
        chains.extend([c | {x} for c in chains
                       if all(relation.comparable(x, y) for y in c)])
    return chains


def upper_bounds(relation, subset):
    """Return the elements above every member of subset, in carrier order."""
    subset = list(subset)
    return [x for x in relation.elements()
            if all(relation.leq(s, x) for s in subset)]


def maximal_elements(relation, subset=None):
    """Return the members of subset (default: the carrier) with nothing strictly above them in subset."""
    members = list(relation.elements()) if subset is None else list(subset)
    return [x for x in members if not any(relation.lt(x, y) for y in members)]


def greatest_element(relation, subset=None):
    """Return the member of subset above all the others, or None."""
    members = list(relation.elements()) if subset is None else list(subset)
    for x in members:
        if all(relation.leq(y, x) for y in members):
            return x
    return None


def is_maximal(relation, m):
    return relation.strict_upper(m) is None


# ============================================================================
# SECTION 3: SUCCESSOR OPERATOR
# ============================================================================

# A successor strategy is a callable (poset, chain) -> frozenset or None.
# It must return a strict superchain of chain when one exists, None otherwise,
# and must give the same answer every time it is asked about the same chain.

def first_extension(poset, chain):
    """Adjoin the first carrier element comparable to every member of chain."""
    for x in poset.elements():
        if x not in chain and all(poset.comparable(x, c) for c in chain):
            return chain | {x}
    return None


def last_extension(poset, chain):
    """Adjoin the last carrier element comparable to every member of chain."""
    for x in reversed(list(poset.elements())):
        if x not in chain and all(poset.comparable(x, c) for c in chain):
            return chain | {x}
    return None


def seeded_extension(seed):
    """
    Build a strategy that adjoins a pseudo-randomly chosen element.

    The choice for a chain is drawn from a generator seeded with
    (seed, chain), so the strategy is single-valued without remembering past
    answers. Answers are cached in an lru_cache of 1024 entries, which holds
    references to the posets it was asked about until they are evicted or
    strategy.cache_clear() is called.

    Args:
        seed: seed for random.Random

    Returns:
        successor strategy
    """
    @lru_cache(maxsize=1024)
    def strategy(poset, chain):
        candidates = [x for x in poset.elements()
                      if x not in chain and all(poset.comparable(x, c) for c in chain)]
        if not candidates:
            return None
        rng = random.Random(hash((seed, chain)))
        return chain | {rng.choice(candidates)}

    return strategy


# Global successor strategy (module-level)
_current_successor_strategy = None


def get_successor_strategy():
    """Get the current default strategy (first_extension unless set)."""
    if _current_successor_strategy is None:
        return first_extension
    return _current_successor_strategy


def set_successor_strategy(strategy):
    """Set the global default successor strategy."""
    global _current_successor_strategy
    if not callable(strategy):
        raise TypeError(f"Expected a callable strategy, got {type(strategy)}")
    _current_successor_strategy = strategy


def reset_successor_strategy():
    """Reset to the default strategy (first_extension)."""
    global _current_successor_strategy
    _current_successor_strategy = None


def successor(poset, chain, strategy=None):
    """
    Apply the successor operator to a chain.

    Returns a strict superchain chosen by the strategy, or chain itself when
    it is already maximal. Either way chain ⊆ successor(chain).

    Args:
        poset: Relation or ExtensionPoset
        chain: iterable of elements forming a chain
        strategy: successor strategy (default: poset.default_successor())

    Returns:
        frozenset

    Raises:
        SuccessorError: if the strategy answers with a non-superchain, or
            with elements outside the poset
    """
    chain = frozenset(chain)
    if strategy is None:
        strategy = poset.default_successor()

    larger = strategy(poset, chain)
    if larger is None:
        return chain

    larger = frozenset(larger)
    foreign = [x for x in larger - chain if x not in poset]
    if foreign:
        raise SuccessorError(
            f"Strategy {getattr(strategy, '__name__', strategy)} added "
            f"{len(foreign)} element(s) outside the poset, e.g. {foreign[0]}"
        )
    if not is_superchain(poset, chain, larger):
        raise SuccessorError(
            f"Strategy {getattr(strategy, '__name__', strategy)} returned a set "
            f"that is not a strict superchain of a {len(chain)}-element chain"
        )
    return larger


# ============================================================================
# SECTION 4: CLOSURE FAMILY
# ============================================================================

class ChainOrigin:
    """
    How a chain entered the closure family.

    kind is one of:
    - 'empty': the empty chain seeding the family
    - 'start': a non-empty seed chain (see maximal_chain_containing)
    - 'successor': Succ of the chain with id parents[0]
    - 'union': union of the chains with ids in parents
    """

    EMPTY = 'empty'
    START = 'start'
    SUCCESSOR = 'successor'
    UNION = 'union'

    def __init__(self, kind, parents=()):
        self.kind = kind
        self.parents = tuple(parents)

    @classmethod
    def empty(cls):
        return cls(cls.EMPTY)

    @classmethod
    def start(cls):
        return cls(cls.START)

    @classmethod
    def from_successor(cls, chain_id):
        return cls(cls.SUCCESSOR, (chain_id,))

    @classmethod
    def from_union(cls, chain_ids):
        return cls(cls.UNION, tuple(chain_ids))

    def __repr__(self):
        if self.parents:
            return f"ChainOrigin({self.kind}, {list(self.parents)})"
        return f"ChainOrigin({self.kind})"

    def __eq__(self, other):
        if not isinstance(other, ChainOrigin):
            return False
        return self.kind == other.kind and self.parents == other.parents

    def __hash__(self):
        return hash((self.kind, self.parents))


class ClosureFamily:
    """
    The least family of chains containing a seed chain and closed under
    the successor operator and under unions.

    Built as a worklist: chains are processed in the order they were
    discovered, each one adds its successor, and unions of discovered chains
    are added when new. Every member carries a ChainOrigin tag.

    After each addition the family is checked to still be totally ordered
    by inclusion; after closing, every member fixed by the successor
    operator must equal the union of the family.
    """

    def __init__(self, poset, strategy=None, start=None, max_steps=10000):
        """
        Create a closure family holding just its seed chain.

        Args:
            poset: Relation or ExtensionPoset
            strategy: successor strategy (default: poset.default_successor())
            start: seed chain (default: the empty chain)
            max_steps: give up after this many worklist steps

        Raises:
            ValueError: if start is not a chain
        """
        self.poset = poset
        self.strategy = strategy if strategy is not None else poset.default_successor()
        self.max_steps = max_steps

        start = frozenset() if start is None else frozenset(start)
        if not is_chain(poset, start):
            raise ValueError("Seed of a closure family must be a chain")

        # Use both dict and list for O(1) membership testing + indexing
        self._chain_ids = {}
        self._chain_list = []
        self._origins = []
        self._successors = {}
        self._steps = 0
        self._closed = False

        self._add(start, ChainOrigin.start() if start else ChainOrigin.empty())

    def __len__(self):
        return len(self._chain_list)

    def __iter__(self):
        return iter(self._chain_list)

    def __getitem__(self, index):
        return self._chain_list[index]

    def __contains__(self, chain):
        return frozenset(chain) in self._chain_ids

    @property
    def is_closed(self):
        return self._closed

    def to_list(self):
        """Return members as a list, in discovery order"""
        return list(self._chain_list)

    def _add(self, chain, origin):
        """Add a chain if not already present, checking totality against every member."""
        if chain in self._chain_ids:
            return False

        if not is_chain(self.poset, chain):
            raise ClosureInvariantError(f"{origin.kind} rule produced a set that is not a chain")
        for i, member in enumerate(self._chain_list):
            if not (member <= chain or chain <= member):
                raise ClosureInvariantError(
                    f"Totality violated: new {origin.kind} chain is incomparable with member {i}"
                )

        self._chain_ids[chain] = len(self._chain_list)
        self._chain_list.append(chain)
        self._origins.append(origin)
        return True

    def _apply_union_rule(self):
        """
        Add unions of discovered chains.

        Under totality the union of a finite sub-family is its largest
        member, so the union of the whole family together with the pairwise
        unions involving the newest member covers every finite sub-family.
        On a finite carrier that largest member is already in the family, so
        this never adds a chain and no member ends up with a union origin.
        """
        added = 0
        everything = self.union()
        if self._add(everything, ChainOrigin.from_union(range(len(self._chain_list)))):
            added += 1

        newest = len(self._chain_list) - 1
        for i in range(newest):
            if self._add(self._chain_list[i] | self._chain_list[newest],
                         ChainOrigin.from_union((i, newest))):
                added += 1
        return added

    def close(self, verbose=False):
        """
        Run the worklist until no rule produces a new chain.

        Args:
            verbose: If True, print progress to stderr

        Returns:
            self (for chaining)

        Raises:
            ClosureInvariantError: on a totality or fixpoint violation, or
                when more than max_steps steps are needed
        """
        if self._closed:
            return self

        n = 0
        with tqdm(desc="Closing chain family", unit="chain", file=sys.stderr,
                  disable=not verbose) as progress:
            while n < len(self._chain_list):
                self._steps += 1
                if self._steps > self.max_steps:
                    raise ClosureInvariantError(
                        f"Closure family did not stabilise within {self.max_steps} steps"
                    )

                chain = self._chain_list[n]
                nxt = successor(self.poset, chain, self.strategy)
                self._successors[n] = nxt
                if self._add(nxt, ChainOrigin.from_successor(n)):
                    progress.update(1)
                    if verbose:
                        print(f"{len(self)}: |chain| = {len(nxt)} = succ {n}",
                              file=sys.stderr, end="\r")

                progress.update(self._apply_union_rule())
                n += 1

        if verbose:
            print(file=sys.stderr)  # New line
            print(f"Closure family: {len(self)} chains after {self._steps} steps", file=sys.stderr)

        self._check_fixpoints()
        self._closed = True
        return self

    def _check_fixpoints(self):
        """A member fixed by the successor operator must be the union of the family."""
        everything = self.union()
        for i, nxt in self._successors.items():
            chain = self._chain_list[i]
            if nxt == chain and chain != everything:
                raise ClosureInvariantError(
                    f"Member {i} is a successor fixpoint but not the union of the family"
                )

    def union(self):
        """Return the union of every member."""
        return reduce(frozenset.union, self._chain_list, frozenset())

    def fixpoints(self):
        """Return the members C with successor(C) == C (once closed, exactly one)."""
        return [self._chain_list[i] for i, nxt in sorted(self._successors.items())
                if nxt == self._chain_list[i]]

    def check_totality(self):
        """Return True if every two members are comparable by inclusion."""
        for a, b in combinations(self._chain_list, 2):
            if not (a <= b or b <= a):
                return False
        return True

    def chain_id(self, chain):
        chain = frozenset(chain)
        if chain not in self._chain_ids:
            raise ValueError("Chain is not a member of the closure family")
        return self._chain_ids[chain]

    def origin(self, chain):
        """Return the ChainOrigin of a member."""
        return self._origins[self.chain_id(chain)]

    def derivation(self, chain):
        """
        Return the derivation of a member, seed first.

        Args:
            chain: member of the family

        Returns:
            list of (chain_id, chain, ChainOrigin), every parent listed
            before its children
        """
        needed = set()
        pending = [self.chain_id(chain)]
        while pending:
            i = pending.pop()
            if i in needed:
                continue
            needed.add(i)
            pending.extend(self._origins[i].parents)
        return [(i, self._chain_list[i], self._origins[i]) for i in sorted(needed)]

    def to_graph(self):
        """
        Return the derivation graph as a NetworkX DiGraph.

        Nodes are chain ids with 'chain' and 'origin' attributes; edges run
        from each parent to the chain it produced.
        """
        G = nx.DiGraph()
        for i, chain in enumerate(self._chain_list):
            G.add_node(i, chain=chain, origin=self._origins[i].kind)
        for i, origin in enumerate(self._origins):
            for parent in origin.parents:
                G.add_edge(parent, i)
        return G


# ============================================================================
# SECTION 5: MAXIMAL CHAINS AND ZORN'S LEMMA
# ============================================================================

def _extract_maximal(family):
    chain = family.union()
    poset = family.poset
    if not is_chain(poset, chain):
        raise ClosureInvariantError("Union of the closure family is not a chain")

    # Checked without the family's own strategy, which may give up too early
    if isinstance(poset, ExtensionPoset):
        extendable = merge_successor(poset, chain) is not None
    else:
        extendable = not is_max_chain(poset, chain)
    if extendable:
        raise ClosureInvariantError("Union of the closure family has a strict superchain")
    return chain


def maximal_chain(poset, strategy=None, verbose=False):
    """
    Compute a maximal chain (Hausdorff maximality principle).

    The chain is the union of the closure family grown from the empty chain.
    It is itself a member of the family, so its successor is a member too and
    therefore contained in it; hence it has no strict superchain.

    Args:
        poset: Relation or ExtensionPoset
        strategy: successor strategy
        verbose: If True, print progress to stderr

    Returns:
        frozenset
    """
    family = ClosureFamily(poset, strategy=strategy).close(verbose=verbose)
    return _extract_maximal(family)


def maximal_chain_containing(poset, chain, strategy=None, verbose=False):
    """
    Extend a chain to a maximal chain.

    Same construction as maximal_chain, with the closure family seeded by
    the given chain instead of the empty one.

    Raises:
        ValueError: if chain is not a chain
    """
    family = ClosureFamily(poset, strategy=strategy, start=chain).close(verbose=verbose)
    return _extract_maximal(family)


def find_maximal(poset, upper_bound_of, strategy=None, verbose=False):
    """
    Zorn's lemma: find a maximal element given upper bounds of chains.

    Takes the maximal chain, asks upper_bound_of for a bound m of it, and
    returns m. Nothing lies strictly above m: if m < a then the chain plus a
    would still be a chain (every member is ≤ m < a), contradicting
    maximality of the chain. The postcondition is checked anyway, since it
    relies on the relation being transitive.

    Args:
        poset: Relation or ExtensionPoset
        upper_bound_of: callable chain -> element above every member, or None
        strategy: successor strategy
        verbose: If True, print progress to stderr

    Returns:
        maximal element

    Raises:
        EmptyCarrierError: if the poset is empty
        UnboundedChainError: if no valid upper bound is supplied
        NotMaximalError: if the bound has something strictly above it
    """
    if poset.is_empty():
        raise EmptyCarrierError("Cannot find a maximal element of an empty poset")

    chain = maximal_chain(poset, strategy=strategy, verbose=verbose)

    m = upper_bound_of(chain)
    if m is None:
        raise UnboundedChainError("Maximal chain has no upper bound", chain)
    for c in chain:
        if not poset.leq(c, m):
            raise UnboundedChainError(f"{m} is not an upper bound: {c} ≰ {m}", chain)

    above = poset.strict_upper(m)
    if above is not None:
        raise NotMaximalError(f"{m} is not maximal: {m} < {above} (is the relation transitive?)")

    return m


def find_maximal_above(relation, a, upper_bound_of=None, strategy=None, verbose=False):
    """
    Find a maximal element m with a ≤ m.

    Runs Zorn's lemma on the up-set of a. A maximal element of the up-set is
    maximal in the whole relation, since anything above it is above a.

    Args:
        relation: Relation (a preorder)
        a: element of the carrier
        upper_bound_of: as for find_maximal (default: first upper bound
            found inside the up-set)

    Returns:
        maximal element above a
    """
    if a not in relation.carrier:
        raise ValueError(f"Unknown element: {a}")
    cone = relation.restrict(relation.up_set(a) | {a})
    if upper_bound_of is None:
        upper_bound_of = _first_upper_bound(cone)
    m = find_maximal(cone, upper_bound_of, strategy=strategy, verbose=verbose)

    above = relation.strict_upper(m)
    if above is not None:
        raise NotMaximalError(f"{m} is not maximal: {m} < {above} (is the relation transitive?)")
    return m


def _first_upper_bound(relation):
    def bound(chain):
        candidates = upper_bounds(relation, chain)
        return candidates[0] if candidates else None
    return bound


def zorn_partial_order(relation, strategy=None, verbose=False):
    """Zorn's lemma with upper bounds looked up inside the carrier."""
    return find_maximal(relation, _first_upper_bound(relation),
                        strategy=strategy, verbose=verbose)


def zorn_subset(family, strategy=None, verbose=False):
    """
    Find a maximal set of a family ordered by inclusion.

    A chain is bounded by its union, or failing that by the first member of
    the family containing the union.

    Args:
        family: iterable of sets

    Returns:
        frozenset, maximal under ⊆ in the family
    """
    members = [frozenset(s) for s in family]
    relation = Relation.from_function(members, lambda a, b: a <= b)

    def bound(chain):
        everything = reduce(frozenset.union, chain, frozenset())
        for s in relation.elements():
            if everything <= s:
                return s
        return None

    return find_maximal(relation, bound, strategy=strategy, verbose=verbose)


def zorn_superset(family, strategy=None, verbose=False):
    """
    Find a minimal set of a family ordered by inclusion.

    Dual of zorn_subset: a chain is bounded below by its intersection, or
    the first member contained in it.
    """
    members = [frozenset(s) for s in family]
    relation = Relation.from_function(members, lambda a, b: b <= a)

    def bound(chain):
        if not chain:
            return next(relation.elements(), None)
        common = reduce(frozenset.intersection, chain)
        for s in relation.elements():
            if s <= common:
                return s
        return None

    return find_maximal(relation, bound, strategy=strategy, verbose=verbose)


# ============================================================================
# SECTION 6: ORDER EXTENSION
# ============================================================================

class ExtensionPoset:
    """
    The partial orders on a fixed carrier that extend a base partial order,
    ordered by pointwise implication.

    The carrier of this poset is implicit (it is usually far too large to
    list); elements() enumerates it lazily. The base relation is the least
    element, so the poset is never empty, and a total order is maximal.
    """

    def __init__(self, base):
        """
        Args:
            base: Relation that is a partial order

        Raises:
            NotAPartialOrderError: if base is not a partial order
        """
        errors = base.validate()
        if errors:
            raise NotAPartialOrderError(errors)
        self.base = base

    def __contains__(self, s):
        return (isinstance(s, Relation)
                and set(s.carrier) == set(self.base.carrier)
                and s.is_partial_order()
                and self.base <= s)

    def leq(self, s1, s2):
        return s1 <= s2

    def lt(self, s1, s2):
        return s1 < s2

    def comparable(self, s1, s2):
        return s1 <= s2 or s2 <= s1

    def is_empty(self):
        return False

    def elements(self):
        """
        Yield every partial order extending the base, smallest first.

        Breadth-first from the base: each order spawns the orders obtained by
        adjoining one incomparable pair in either direction. Every extension
        is reached, since it can be built from the base one pair at a time.
        """
        seen = {self.base}
        order = [self.base]
        n = 0
        while n < len(order):
            s = order[n]
            yield s
            for x, y in s.incomparable_pairs():
                for t in (s.adjoin(x, y), s.adjoin(y, x)):
                    if t not in seen:
                        seen.add(t)
                        order.append(t)
            n += 1

    def strict_upper(self, s):
        """Return a partial order strictly above s, or None if s is total."""
        pair = s.first_incomparable_pair()
        if pair is None:
            return None
        return s.adjoin(*pair)

    def default_successor(self):
        return merge_successor

    def chain_upper_bound(self, chain):
        """
        Upper bound of a chain of extensions: their pointwise union.

        The union is reflexive and antisymmetric because its members are.
        For transitivity, a ≤ b in s1 and b ≤ c in s2 are both facts of the
        larger of s1 and s2, which is transitive, so a ≤ c holds there.

        Args:
            chain: iterable of members, totally ordered by ⊆

        Returns:
            Relation (the base for the empty chain)

        Raises:
            UnboundedChainError: if chain is not a chain of this poset
        """
        members = list(chain)
        if not members:
            return self.base
        if not is_chain(self, members):
            raise UnboundedChainError("Members are not comparable by inclusion", frozenset(members))

        for s1 in members:
            for s2 in members:
                larger = s2 if s1 <= s2 else s1
                for (a, b) in s1.pairs:
                    for c in s2.up_set(b):
                        if not larger.holds(a, c):
                            raise UnboundedChainError(
                                f"Union is not transitive at {a} ≤ {b} ≤ {c}", frozenset(members)
                            )

        bound = reduce(Relation.union, members)
        if bound not in self:
            raise UnboundedChainError("Union of the chain is not an extension of the base",
                                      frozenset(members))
        return bound


def merge_successor(poset, chain):
    """
    Successor strategy for an ExtensionPoset.

    A chain of extensions is maximal exactly when it contains the base, has
    no gap between consecutive members, and its top is total. Otherwise:
    - add the base if it is missing
    - fill the first gap lower ⊊ upper with lower plus one pair of upper
      (closing lower ∪ {(a, b)} stays inside upper; if it equals upper for
      every missing pair, nothing fits strictly between them)
    - adjoin the first incomparable pair of the top member
    """
    base = poset.base
    if not chain:
        return frozenset([base])

    members = sorted(chain, key=lambda s: len(s.pairs))
    if members[0] != base:
        return chain | {base}

    for lower, upper in zip(members, members[1:]):
        for (a, b) in upper.sorted_pairs():
            if lower.holds(a, b):
                continue
            between = lower.adjoin(a, b)
            if between != upper:
                return chain | {between}

    top = members[-1]
    pair = top.first_incomparable_pair()
    if pair is None:
        return None
    return chain | {top.adjoin(*pair)}


def extend_to_linear_order(relation, strategy=None, verbose=False):
    """
    Extend a partial order to a total order (Szpilrajn extension).

    Runs Zorn's lemma over the partial orders extending relation: chains are
    bounded by their pointwise union, so a maximal extension exists. A
    maximal extension is total, because an incomparable pair x, y could be
    adjoined to get a strictly larger extension. The closing loop below
    performs exactly that adjoining and so runs zero times.

    Args:
        relation: Relation that is a partial order
        strategy: successor strategy for the extension poset
            (default: merge_successor)
        verbose: If True, print progress to stderr

    Returns:
        Relation: total order containing relation

    Raises:
        NotAPartialOrderError: if relation is not a partial order
    """
    poset = ExtensionPoset(relation)
    s = find_maximal(poset, poset.chain_upper_bound, strategy=strategy, verbose=verbose)

    pair = s.first_incomparable_pair()
    while pair is not None:
        if verbose:
            print(f"Adjoining incomparable pair {pair[0]} ≤ {pair[1]}", file=sys.stderr)
        s = s.adjoin(*pair)
        pair = s.first_incomparable_pair()

    return s


def linear_extensions(relation):
    """
    Enumerate every total order extending a finite partial order.

    Args:
        relation: Relation that is a partial order

    Returns:
        list of Relations

    Raises:
        NotAPartialOrderError: if relation is not a partial order
    """
    errors = relation.validate()
    if errors:
        raise NotAPartialOrderError(errors)
    return [Relation.from_sequence(order, carrier=relation.carrier)
            for order in nx.all_topological_sorts(relation.to_graph())]
