"""
Tests for mapspace dimensions and mapping IDs.
"""

import pytest


class TestDimension:

    def test_search_order(self):
        from simple_mapper.mapspace import NUM_DIMENSIONS, SEARCH_ORDER, Dimension

        assert NUM_DIMENSIONS == 4
        assert SEARCH_ORDER == (
            Dimension.INDEX_FACTORIZATION,
            Dimension.LOOP_PERMUTATION,
            Dimension.SPATIAL,
            Dimension.DATATYPE_BYPASS,
        )
        assert Dimension.SPATIAL.label == "Spatial"


class TestMappingID:
    """Tests for MappingID class."""

    def test_set_and_get(self):
        from simple_mapper.mapspace import Dimension, MappingID

        mapping_id = MappingID((3, 2, 5, 4))
        mapping_id.set(Dimension.SPATIAL, 4)
        mapping_id.set(Dimension.DATATYPE_BYPASS, 3)

        assert mapping_id.get(Dimension.SPATIAL) == 4
        assert mapping_id[Dimension.DATATYPE_BYPASS] == 3
        assert mapping_id.values == (0, 0, 4, 3)
        assert mapping_id.sizes == (3, 2, 5, 4)

    def test_out_of_range_rejected(self):
        from simple_mapper.mapspace import Dimension, InvalidCoordinate, MappingID

        mapping_id = MappingID((3, 2, 5, 4))

        with pytest.raises(InvalidCoordinate):
            mapping_id.set(Dimension.LOOP_PERMUTATION, 2)
        with pytest.raises(InvalidCoordinate):
            mapping_id.set(Dimension.INDEX_FACTORIZATION, -1)
        # The failed set leaves the previous value.
        assert mapping_id.get(Dimension.LOOP_PERMUTATION) == 0

    def test_non_int_values_rejected(self):
        from simple_mapper.mapspace import Dimension, InvalidCoordinate, MappingID

        mapping_id = MappingID((3, 2, 5, 4))

        with pytest.raises(InvalidCoordinate):
            mapping_id.set(Dimension.INDEX_FACTORIZATION, 1.5)
        with pytest.raises(InvalidCoordinate):
            mapping_id.set(Dimension.INDEX_FACTORIZATION, 1.0)
        with pytest.raises(InvalidCoordinate):
            mapping_id.set(Dimension.SPATIAL, True)
        assert mapping_id.values == (0, 0, 0, 0)

    def test_zero_size_dimension_accepts_nothing(self):
        from simple_mapper.mapspace import InvalidCoordinate, MappingID

        mapping_id = MappingID((0, 1, 1, 1))

        with pytest.raises(InvalidCoordinate):
            mapping_id.set(0, 0)

    def test_wrong_arity(self):
        from simple_mapper.mapspace import MappingID

        with pytest.raises(ValueError):
            MappingID((1, 2, 3))
        with pytest.raises(ValueError):
            MappingID((1, 2, 3, -4))

    def test_values_beyond_64_bits(self):
        from simple_mapper.mapspace import Dimension, MappingID

        big = 2 ** 70
        mapping_id = MappingID((big, big, 1, 1))
        mapping_id.set(Dimension.INDEX_FACTORIZATION, big - 1)
        mapping_id.set(Dimension.LOOP_PERMUTATION, big - 1)

        assert mapping_id.get(Dimension.INDEX_FACTORIZATION) == big - 1
        assert mapping_id.integer == big * big - 1

    def test_integer_is_search_order_rank(self):
        from simple_mapper.mapspace import MappingID

        mapping_id = MappingID.from_values((3, 2, 5, 4), (1, 1, 2, 3))

        assert mapping_id.integer == ((1 * 2 + 1) * 5 + 2) * 4 + 3

    def test_equality_and_hash(self):
        from simple_mapper.mapspace import MappingID

        a = MappingID.from_values((2, 2, 2, 2), (1, 0, 1, 0))
        b = MappingID.from_values((2, 2, 2, 2), (1, 0, 1, 0))

        assert a == b
        assert len({a, b}) == 1
        assert repr(a) == "MappingID((1, 0, 1, 0))"
