"""Тесты для cache_solve.

Coverage:
- Cold cache: результат = invert_matrix(M)
- Warm cache: 0 дополнительных вызовов примитива
- Инвалидация при set_matrix (даже для равной матрицы)
- Ошибка примитива: слот пуст, следующий вызов повторяет попытку
- Проброс *args/**kwargs в примитив
- Лог "getting cached data"
- Конкурентные вызовы: один вызов примитива
"""

import logging
import threading
import time

import numpy as np
import pytest

from src.cache import CachingMatrix, cache_solve
from src.core.math.inversion import (
    InversionConfig,
    MatrixDimensionMismatch,
    MatrixNotInvertible,
    invert_matrix,
)
from src.core.math.numerical_safeguards import matrices_close


class CountingInverter:
    """Примитив обращения со счётчиком вызовов."""

    def __init__(self, delay_sec: float = 0.0):
        self.calls = 0
        self.delay_sec = delay_sec
        self.last_kwargs: dict = {}

    def __call__(self, matrix, *args, **kwargs):
        self.calls += 1
        self.last_kwargs = kwargs
        if self.delay_sec:
            time.sleep(self.delay_sec)
        return invert_matrix(matrix, *args, **kwargs)


@pytest.fixture
def inverter():
    return CountingInverter()


@pytest.fixture
def correlation_matrix():
    """Корреляционная матрица (обратима по построению)."""
    rng = np.random.default_rng(7)
    data = rng.normal(size=(40, 5))
    return np.corrcoef(data, rowvar=False)


class TestCacheSolveScenario:
    """Сценарий diag(2, 2) → I."""

    def test_full_scenario(self, inverter):
        """count: 1 → 1 → 2."""
        handle = CachingMatrix([[2.0, 0.0], [0.0, 2.0]])

        first = cache_solve(handle, inverter=inverter)
        assert matrices_close(first, [[0.5, 0.0], [0.0, 0.5]])
        assert inverter.calls == 1

        second = cache_solve(handle, inverter=inverter)
        assert matrices_close(second, first)
        assert inverter.calls == 1

        handle.set_matrix([[1.0, 0.0], [0.0, 1.0]])
        third = cache_solve(handle, inverter=inverter)
        assert matrices_close(third, np.eye(2))
        assert inverter.calls == 2


class TestCacheSolveColdCache:
    """Пустой слот."""

    def test_matches_invert_matrix(self, correlation_matrix):
        """cache_solve(handle(M)) == invert_matrix(M)."""
        handle = CachingMatrix(correlation_matrix)

        result = cache_solve(handle)

        assert matrices_close(result, invert_matrix(correlation_matrix))

    def test_complex_diagonal_matches_numpy(self):
        """Complex матрица: результат = numpy.linalg.inv(M)."""
        matrix = np.array([[1j, 0.0], [0.0, 2.0]])
        handle = CachingMatrix(matrix)

        result = cache_solve(handle, inverter=np.linalg.inv)

        assert np.iscomplexobj(result)
        assert matrices_close(result, np.linalg.inv(matrix))
        assert matrices_close(result, [[-1j, 0.0], [0.0, 0.5]])

    def test_populates_slot(self, inverter):
        """После успешного вызова слот заполнен результатом."""
        handle = CachingMatrix([[4.0, 7.0], [2.0, 6.0]])

        result = cache_solve(handle, inverter=inverter)

        assert handle.has_inverse
        assert np.array_equal(handle.get_inverse(), result)

    def test_does_not_mutate_matrix(self, inverter):
        """Матрица handle не меняется, эпоха тоже."""
        handle = CachingMatrix([[4.0, 7.0], [2.0, 6.0]])
        before = handle.get_matrix()

        cache_solve(handle, inverter=inverter)

        assert handle.get_matrix() is before
        assert handle.epoch == 0


class TestCacheSolveWarmCache:
    """Заполненный слот."""

    def test_no_extra_primitive_calls(self, inverter, correlation_matrix):
        """Повторные вызовы не вызывают примитив."""
        handle = CachingMatrix(correlation_matrix)

        first = cache_solve(handle, inverter=inverter)
        for _ in range(5):
            assert np.array_equal(cache_solve(handle, inverter=inverter), first)

        assert inverter.calls == 1

    def test_returns_preloaded_inverse_without_validation(self, inverter):
        """Значение из set_inverse возвращается как есть."""
        handle = CachingMatrix([[2.0, 0.0], [0.0, 2.0]])
        handle.set_inverse([[9.0, 9.0], [9.0, 9.0]])

        result = cache_solve(handle, inverter=inverter)

        assert np.array_equal(result, np.full((2, 2), 9.0))
        assert inverter.calls == 0

    def test_logs_cache_hit(self, inverter, caplog):
        """Попадание в кэш логируется на INFO."""
        handle = CachingMatrix([[2.0, 0.0], [0.0, 2.0]])

        with caplog.at_level(logging.INFO, logger="src.cache.cache_solve"):
            cache_solve(handle, inverter=inverter)
            assert "getting cached data" not in caplog.text

            cache_solve(handle, inverter=inverter)

        assert "getting cached data" in caplog.text


class TestCacheSolveInvalidation:
    """Замена матрицы."""

    def test_recomputes_after_replacement(self, inverter):
        """set_matrix → следующий вызов промахивается."""
        handle = CachingMatrix([[2.0, 0.0], [0.0, 2.0]])
        cache_solve(handle, inverter=inverter)

        handle.set_matrix([[4.0, 0.0], [0.0, 4.0]])
        result = cache_solve(handle, inverter=inverter)

        assert inverter.calls == 2
        assert matrices_close(result, [[0.25, 0.0], [0.0, 0.25]])

    def test_recomputes_for_equal_matrix(self, inverter):
        """Равная по значению матрица тоже вызывает пересчёт."""
        matrix = [[2.0, 0.0], [0.0, 2.0]]
        handle = CachingMatrix(matrix)
        cache_solve(handle, inverter=inverter)

        handle.set_matrix(matrix)
        cache_solve(handle, inverter=inverter)

        assert inverter.calls == 2


class TestCacheSolveFailure:
    """Ошибки примитива."""

    def test_singular_propagates_and_slot_stays_empty(self, inverter):
        """MatrixNotInvertible пробрасывается, слот пуст."""
        handle = CachingMatrix([[1.0, 2.0], [2.0, 4.0]])

        with pytest.raises(MatrixNotInvertible):
            cache_solve(handle, inverter=inverter)

        assert handle.get_inverse() is None

    def test_failure_is_not_memoized(self, inverter):
        """Повторный вызов снова обращается к примитиву."""
        handle = CachingMatrix([[1.0, 2.0], [2.0, 4.0]])

        for expected_calls in (1, 2):
            with pytest.raises(MatrixNotInvertible):
                cache_solve(handle, inverter=inverter)
            assert inverter.calls == expected_calls

    def test_nan_inverse_never_cached(self, inverter):
        """check_finite=False: NaN-обратная не попадает в слот."""
        handle = CachingMatrix([[1.0, np.nan], [0.0, 1.0]])
        config = InversionConfig(check_finite=False)

        with pytest.raises(MatrixNotInvertible):
            cache_solve(handle, inverter=inverter, config=config)

        assert handle.get_inverse() is None

    def test_recovers_after_replacement(self, inverter):
        """После замены на обратимую матрицу вызов успешен."""
        handle = CachingMatrix([[1.0, 2.0, 3.0]])

        with pytest.raises(MatrixDimensionMismatch):
            cache_solve(handle, inverter=inverter)

        handle.set_matrix(np.eye(3))
        assert matrices_close(cache_solve(handle, inverter=inverter), np.eye(3))

    def test_arbitrary_exception_propagates_unchanged(self):
        """Исключение любого inverter пробрасывается тем же объектом."""
        error = RuntimeError("backend unavailable")

        def failing(matrix):
            raise error

        handle = CachingMatrix(np.eye(2))
        with pytest.raises(RuntimeError) as exc_info:
            cache_solve(handle, inverter=failing)

        assert exc_info.value is error
        assert not handle.has_inverse


class TestCacheSolveForwarding:
    """Проброс аргументов в примитив."""

    def test_kwargs_forwarded(self, inverter):
        """config передаётся в invert_matrix."""
        handle = CachingMatrix([[1.0, 1.0], [1.0, 1.0 + 1e-10]])
        config = InversionConfig(max_condition_number=1e6)

        with pytest.raises(MatrixNotInvertible, match="numerically singular"):
            cache_solve(handle, inverter=inverter, config=config)

        assert inverter.last_kwargs == {"config": config}

    def test_positional_args_forwarded(self):
        """Позиционные аргументы идут после матрицы."""
        received = []

        def inverter(matrix, scale):
            received.append(scale)
            return np.linalg.inv(matrix) * scale

        handle = CachingMatrix([[2.0, 0.0], [0.0, 2.0]])
        result = cache_solve(handle, 2.0, inverter=inverter)

        assert received == [2.0]
        assert matrices_close(result, np.eye(2))


class TestCacheSolveConcurrency:
    """Общий handle между потоками."""

    def test_single_computation_for_concurrent_callers(self):
        """Один вызов примитива на пустую эпоху."""
        inverter = CountingInverter(delay_sec=0.05)
        handle = CachingMatrix([[2.0, 0.0], [0.0, 2.0]])
        start = threading.Barrier(8)
        results = []
        results_lock = threading.Lock()

        def worker():
            start.wait()
            inverse = cache_solve(handle, inverter=inverter)
            with results_lock:
                results.append(inverse)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert inverter.calls == 1
        assert len(results) == 8
        for inverse in results:
            assert matrices_close(inverse, [[0.5, 0.0], [0.0, 0.5]])
