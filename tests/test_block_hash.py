import pytest

from voxkit.block_hash import SL, SL2, any_index_hash, long_index_hash

INDICES = [
    (0, 0, 0),
    (1, 2, 3),
    (-1, -1, -1),
    (100000, -7, 5),
    (-(2**31), 2**31 - 1, 12),
]


def test_origin_hashes_to_zero():
    assert any_index_hash((0, 0, 0)) == 0


def test_unit_axes_follow_constants():
    assert any_index_hash((1, 0, 0)) == 1
    assert any_index_hash((0, 1, 0)) == SL
    assert any_index_hash((0, 0, 1)) == SL2


def test_minus_one_wraps_to_max_uint():
    assert any_index_hash((-1, 0, 0)) == 2**32 - 1


@pytest.mark.parametrize("index", INDICES)
def test_hash_fits_in_uint32(index):
    assert 0 <= any_index_hash(index) < 2**32
    assert 0 <= long_index_hash(index) < 2**32


@pytest.mark.parametrize("index", INDICES)
def test_long_and_any_hash_agree(index):
    assert long_index_hash(index) == any_index_hash(index)


def test_hash_accepts_lists_and_tuples_alike():
    assert any_index_hash([3, -4, 5]) == any_index_hash((3, -4, 5))


def test_hash_is_linear_mod_2_32():
    a = (3, 9, -2)
    b = (-1, 4, 7)
    total = tuple(x + y for x, y in zip(a, b))
    assert any_index_hash(total) == (any_index_hash(a) + any_index_hash(b)) % 2**32


def test_neighbouring_indices_hash_differently():
    hashes = {any_index_hash((x, y, z)) for x in range(4) for y in range(4) for z in range(4)}
    assert len(hashes) == 64