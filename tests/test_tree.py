import pytest

from apps.variations.services import (
    AttributeForest,
    AttributeNode,
    DepthMismatchError,
    DuplicateNodeError,
    InvalidTreeError,
    TreeCycleError,
    UnknownParentError,
)


def test_roots_and_leaves_follow_input_order(forest):
    assert forest.roots() == ('papel', 'cor')
    assert forest.leaves() == ['tipo', 'gramatura', 'cor']
    assert forest.children('papel') == ('tipo', 'gramatura')
    assert forest.is_leaf('cor')
    assert not forest.is_leaf('papel')


def test_paths_and_roots(forest):
    assert forest.path_of('gramatura') == ('Papel', 'Gramatura')
    assert forest.path_label('gramatura') == 'Papel > Gramatura'
    assert forest.path_label('gramatura', separator='/') == 'Papel/Gramatura'
    assert forest.root_of('tipo') == 'papel'
    assert forest.root_of('cor') == 'cor'
    assert forest.parent_of('tipo') == 'papel'
    assert forest.parent_of('papel') is None


def test_leaves_grouped_by_root(forest):
    assert forest.leaves_by_root() == {
        'papel': ['tipo', 'gramatura'],
        'cor': ['cor'],
    }


def test_ids_are_normalized_to_strings():
    forest = AttributeForest([
        AttributeNode(1, 'Papel'),
        AttributeNode(2, 'Tipo', parent_id=1, depth=1),
    ])
    assert 1 in forest
    assert forest.root_of(2) == '1'
    assert len(forest) == 2


def test_duplicate_id_rejected():
    with pytest.raises(DuplicateNodeError) as exc_info:
        AttributeForest([AttributeNode('a', 'A'), AttributeNode('a', 'Again')])
    assert exc_info.value.node_id == 'a'


def test_unknown_parent_rejected():
    with pytest.raises(UnknownParentError):
        AttributeForest([AttributeNode('a', 'A', parent_id='missing', depth=1)])


def test_cycle_rejected():
    with pytest.raises(TreeCycleError):
        AttributeForest([
            AttributeNode('a', 'A', parent_id='b', depth=1),
            AttributeNode('b', 'B', parent_id='a', depth=1),
        ])


def test_self_parent_rejected():
    with pytest.raises(InvalidTreeError):
        AttributeForest([AttributeNode('a', 'A', parent_id='a', depth=1)])


def test_depth_mismatch_rejected():
    with pytest.raises(DepthMismatchError) as exc_info:
        AttributeForest([
            AttributeNode('a', 'A'),
            AttributeNode('b', 'B', parent_id='a', depth=3),
        ])
    assert exc_info.value.node_id == 'b'


def test_from_nested_assigns_depth_from_nesting():
    forest = AttributeForest.from_nested([
        AttributeNode('papel', 'Papel', children=(
            AttributeNode('tipo', 'Tipo', children=(
                AttributeNode('brilho', 'Brilho'),
            )),
        )),
        AttributeNode('cor', 'Cor'),
    ])
    assert forest.node('brilho').depth == 2
    assert forest.path_label('brilho') == 'Papel > Tipo > Brilho'
    assert forest.leaves() == ['brilho', 'cor']


def test_flat_constructor_rejects_nested_children():
    nested = AttributeNode('papel', 'Papel', children=(
        AttributeNode('tipo', 'Tipo'),
    ))

    with pytest.raises(InvalidTreeError) as exc_info:
        AttributeForest([nested, AttributeNode('cor', 'Cor')])

    assert exc_info.value.node_id == 'papel'
    assert 'from_nested' in str(exc_info.value)


def test_from_nested_rejects_conflicting_parent():
    with pytest.raises(UnknownParentError):
        AttributeForest.from_nested([
            AttributeNode('papel', 'Papel', children=(
                AttributeNode('tipo', 'Tipo', parent_id='cor'),
            )),
        ])


def test_empty_forest():
    forest = AttributeForest([])
    assert forest.roots() == ()
    assert forest.leaves() == []
    assert forest.leaves_by_root() == {}
