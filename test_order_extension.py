"""
test_order_extension.py

Tests for extending partial orders to total orders via Zorn's lemma.
"""

import sys
sys.path.insert(0, '.')

import pytest

from zorn_core import (
    Relation, ExtensionPoset, ClosureFamily,
    merge_successor, first_extension, seeded_extension,
    extend_to_linear_order, linear_extensions,
    maximal_chain, find_maximal, is_chain,
    NotAPartialOrderError, UnboundedChainError,
)


def divisibility(numbers):
    return Relation.from_function(numbers, lambda a, b: b % a == 0)


def abc_relation():
    """a ≤ b, c incomparable to both."""
    return Relation('abc', [('a', 'a'), ('b', 'b'), ('c', 'c'), ('a', 'b')])


def antichain(elements):
    return Relation(elements, [(x, x) for x in elements])


def assert_linear_extension(base, result):
    assert base <= result, "Extension must contain the base relation"
    assert result.is_total(), "Extension must be total"
    assert result.is_partial_order(), "Extension must be a partial order"


# ============================================================================
# Extension correctness
# ============================================================================

def test_extends_divisibility():
    base = divisibility([1, 2, 3, 4, 6, 12])
    result = extend_to_linear_order(base)
    assert_linear_extension(base, result)
    assert result in linear_extensions(base)


def test_abc_scenario():
    base = abc_relation()
    result = extend_to_linear_order(base)
    assert_linear_extension(base, result)

    valid = {
        Relation.from_sequence('abc'),
        Relation.from_sequence('acb'),
        Relation.from_sequence('cab'),
    }
    assert set(linear_extensions(base)) == valid
    assert result in valid


def test_total_order_is_fixed():
    base = Relation.from_sequence([3, 1, 4, 5, 9, 2, 6])
    assert extend_to_linear_order(base) == base


def test_antichain_extension():
    base = antichain('wxyz')
    result = extend_to_linear_order(base)
    assert_linear_extension(base, result)
    assert result.as_sequence() == ['w', 'x', 'y', 'z']


@pytest.mark.parametrize("seed", range(4))
def test_extension_with_seeded_strategy(seed):
    base = abc_relation()
    result = extend_to_linear_order(base, strategy=seeded_extension(seed))
    assert_linear_extension(base, result)


def test_extension_with_generic_strategy():
    base = antichain('xy')
    result = extend_to_linear_order(base, strategy=first_extension)
    assert result == Relation.from_sequence('xy')


def test_rejects_non_partial_orders():
    cyclic = Relation('ab', [('a', 'a'), ('b', 'b'), ('a', 'b'), ('b', 'a')])
    with pytest.raises(NotAPartialOrderError) as excinfo:
        extend_to_linear_order(cyclic)
    assert any("Antisymmetry" in e for e in excinfo.value.errors)

    with pytest.raises(NotAPartialOrderError):
        extend_to_linear_order(Relation('ab', [('a', 'b')]))

    with pytest.raises(NotAPartialOrderError):
        linear_extensions(cyclic)


def test_linear_extensions_count():
    assert len(linear_extensions(antichain('abc'))) == 6
    assert len(linear_extensions(Relation.from_sequence('abcd'))) == 1


# ============================================================================
# Extension poset
# ============================================================================

def test_extension_poset_membership():
    base = abc_relation()
    poset = ExtensionPoset(base)
    assert base in poset
    assert Relation.from_sequence('cab') in poset
    assert Relation.from_sequence('bac') not in poset
    assert not poset.is_empty()


def test_extension_poset_elements():
    assert list(ExtensionPoset(antichain('xy')).elements()) == [
        antichain('xy'),
        Relation.from_sequence('xy', carrier='xy'),
        Relation.from_sequence('yx', carrier='xy'),
    ]
    poset = ExtensionPoset(abc_relation())
    elements = list(poset.elements())
    assert len(elements) == len(set(elements))
    assert all(s in poset for s in elements)


def test_strict_upper_of_extension():
    poset = ExtensionPoset(abc_relation())
    above = poset.strict_upper(abc_relation())
    assert above in poset
    assert poset.lt(abc_relation(), above)
    assert poset.strict_upper(Relation.from_sequence('abc')) is None


def test_chain_upper_bound_is_union():
    base = abc_relation()
    poset = ExtensionPoset(base)
    middle = base.adjoin('a', 'c')
    top = middle.adjoin('b', 'c')

    assert poset.chain_upper_bound([]) == base
    assert poset.chain_upper_bound([base, middle]) == middle
    assert poset.chain_upper_bound({base, middle, top}) == top


def test_chain_upper_bound_rejects_non_chains():
    base = abc_relation()
    poset = ExtensionPoset(base)
    with pytest.raises(UnboundedChainError):
        poset.chain_upper_bound([base.adjoin('a', 'c'), base.adjoin('c', 'a')])


# ============================================================================
# Merge successor
# ============================================================================

def test_merge_successor_steps():
    base = abc_relation()
    poset = ExtensionPoset(base)

    assert merge_successor(poset, frozenset()) == {base}

    first = base.adjoin('a', 'c')
    assert merge_successor(poset, frozenset([base])) == {base, first}

    # A chain without the base gets the base added
    assert merge_successor(poset, frozenset([first])) == {base, first}

    total = Relation.from_sequence('abc', carrier='abc')
    assert merge_successor(poset, frozenset([base, first, total])) is None


def test_merge_successor_fills_gaps():
    base = antichain('xyz')
    poset = ExtensionPoset(base)
    total = Relation.from_sequence('xyz', carrier='xyz')

    nxt = merge_successor(poset, frozenset([base, total]))
    assert nxt is not None
    (between,) = nxt - {base, total}
    assert base < between < total
    assert between in poset


def test_extension_closure_family_is_total():
    base = divisibility([1, 2, 3, 4, 6, 12])
    poset = ExtensionPoset(base)
    family = ClosureFamily(poset).close()
    assert family.check_totality()
    assert len(family.fixpoints()) == 1

    chain = maximal_chain(poset)
    assert is_chain(poset, chain)
    assert base in chain
    assert find_maximal(poset, poset.chain_upper_bound).is_total()


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
