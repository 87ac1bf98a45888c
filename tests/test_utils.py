"""
Tests for utility functions.
"""


class TestUtils:
    """Tests for utility functions."""

    def test_get_divisors(self):
        """Test divisor function."""
        from simple_mapper.utils import get_divisors

        assert get_divisors(1) == [1]
        assert get_divisors(12) == [1, 2, 3, 4, 6, 12]
        assert get_divisors(16) == [1, 2, 4, 8, 16]

    def test_enumerate_factorizations(self):
        from simple_mapper.utils import enumerate_factorizations

        assert list(enumerate_factorizations(4, 2)) == [(1, 4), (2, 2), (4, 1)]
        assert list(enumerate_factorizations(1, 3)) == [(1, 1, 1)]
        assert list(enumerate_factorizations(5, 0)) == []

    def test_factorizations_multiply_back(self):
        from simple_mapper.utils import enumerate_factorizations, product

        for factors in enumerate_factorizations(36, 3):
            assert product(factors) == 36

    def test_factorization_count(self):
        """4 = 2^2 into 4 ordered factors: C(2 + 3, 3) ways."""
        from simple_mapper.utils import enumerate_factorizations

        assert len(list(enumerate_factorizations(4, 4))) == 10
        assert len(set(enumerate_factorizations(12, 3))) == 18

    def test_product_is_exact(self):
        from simple_mapper.utils import product

        assert product([2 ** 40, 2 ** 40, 2 ** 40]) == 2 ** 120
        assert product([]) == 1

    def test_timer(self):
        from simple_mapper.utils import Timer

        timer = Timer()
        timer.start("search")
        elapsed = timer.stop("search")

        assert elapsed >= 0.0
        assert "search" in timer.report()
        assert timer.stop("never-started") == 0.0
