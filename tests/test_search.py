"""
Tests for the exhaustive search loop and best-mapping tracking.
"""

import itertools

from conftest import StubEngine, StubMapSpace


class TestEnumeration:

    def test_nesting_order(self):
        """First dimension slowest, last fastest."""
        from simple_mapper.search import enumerate_coordinates

        sizes = (2, 1, 3, 2)

        assert list(enumerate_coordinates(sizes)) == list(
            itertools.product(*(range(s) for s in sizes))
        )

    def test_zero_size_yields_nothing(self):
        from simple_mapper.search import enumerate_coordinates

        assert list(enumerate_coordinates((3, 0, 2, 2))) == []

    def test_huge_sizes_are_lazy(self):
        """Sizes whose product exceeds 128 bits still enumerate from the start."""
        from simple_mapper.search import enumerate_coordinates

        big = 2 ** 100
        walk = enumerate_coordinates((big, big, 1, 2))

        assert next(walk) == (0, 0, 0, 0)
        assert next(walk) == (0, 0, 0, 1)
        assert next(walk) == (0, 1, 0, 0)

    def test_mapping_ids_cover_the_space(self):
        from simple_mapper.search import enumerate_mapping_ids

        mapspace = StubMapSpace((2, 2, 1, 3))
        ids = list(enumerate_mapping_ids(mapspace))

        assert len(ids) == 12
        assert [m.integer for m in ids] == list(range(12))


class TestBestTracker:

    def test_first_candidate_recorded(self):
        from simple_mapper.search import BestTracker
        from conftest import StubMapping

        best = BestTracker()
        engine = StubEngine({0: 5.0})
        engine.current = 0

        assert not best.is_set
        assert best.update(StubMapping(0), engine)
        assert best.metric == 5.0
        assert best.engine is not engine

    def test_tie_keeps_earlier(self):
        from simple_mapper.search import BestTracker
        from conftest import StubMapping

        best = BestTracker()
        engine = StubEngine({0: 5.0, 1: 5.0, 2: 4.0})
        for index in range(3):
            engine.current = index
            best.update(StubMapping(index), engine)
            if index == 1:
                assert best.mapping.index == 0

        assert best.mapping.index == 2
        assert best.engine.current == 2


class TestRunSearch:
    """Tests for run_search."""

    def test_visits_every_point_once_in_order(self):
        from simple_mapper.search import run_search

        mapspace = StubMapSpace((2, 3, 2, 2))
        engine = StubEngine({i: 1.0 for i in range(24)})

        result = run_search(mapspace, engine, workload=None)

        assert result.stats.attempts == 24
        assert mapspace.calls == list(itertools.product(range(2), range(3), range(2), range(2)))

    def test_picks_minimum_energy(self):
        from simple_mapper.search import run_search

        energies = {0: 9.0, 1: 7.0, 2: 3.0, 3: 8.0, 4: 3.0, 5: 6.0}
        result = run_search(StubMapSpace((3, 1, 2, 1)), StubEngine(energies), workload=None)

        assert result.found
        assert result.best.metric == 3.0
        # Index 4 ties with 2; the earlier one stays.
        assert result.best.mapping.index == 2
        assert result.stats.improvements == 3

    def test_illegal_and_failing_points_are_skipped(self):
        from simple_mapper.search import run_search

        energies = {i: float(10 - i) for i in range(8)}
        mapspace = StubMapSpace((8, 1, 1, 1), legal=lambda index: index % 2 == 0)
        # 6 would be the best legal point but fails a level.
        engine = StubEngine(energies, failing={6})

        result = run_search(mapspace, engine, workload=None)

        assert result.stats.attempts == 8
        assert result.stats.legal == 4
        assert result.stats.valid == 3
        assert engine.evaluations == 4
        assert result.best.mapping.index == 4
        assert result.best.metric == 6.0

    def test_nothing_legal(self):
        from simple_mapper.search import run_search

        mapspace = StubMapSpace((3, 2, 1, 2), legal=lambda index: False)
        engine = StubEngine({})

        result = run_search(mapspace, engine, workload=None)

        assert not result.found
        assert result.stats.attempts == 12
        assert result.stats.legal == 0
        assert engine.evaluations == 0

    def test_empty_mapspace(self):
        from simple_mapper.search import run_search

        mapspace = StubMapSpace((0, 5, 5, 5))
        result = run_search(mapspace, StubEngine({}), workload=None)

        assert not result.found
        assert result.stats.attempts == 0
        assert mapspace.calls == []

    def test_rerun_gives_same_best(self):
        from simple_mapper.search import run_search

        energies = {i: float((i * 7) % 11) for i in range(16)}

        first = run_search(StubMapSpace((2, 2, 2, 2)), StubEngine(energies), workload=None)
        second = run_search(StubMapSpace((2, 2, 2, 2)), StubEngine(energies), workload=None)

        assert first.best.mapping.index == second.best.mapping.index
        assert first.best.metric == second.best.metric

    def test_progress_bar(self):
        from simple_mapper.search import run_search

        result = run_search(
            StubMapSpace((2, 1, 1, 1)), StubEngine({0: 2.0, 1: 1.0}), workload=None, progress=True
        )

        assert result.best.metric == 1.0
