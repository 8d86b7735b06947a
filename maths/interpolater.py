import numpy as np
from numba import njit
from scipy.interpolate import CubicSpline

MIN_SAMPLES = 3

# slots of the accelerator state array
CACHE = 0
MISS_COUNT = 1
HIT_COUNT = 2


class SearchAccelerator:
    """
    Remembers the last resolved table interval so that sequential nearby
    lookups skip the binary search.

    The state lives in a small int64 array so the compiled kernels can update
    it in place. Not safe to share between threads.
    """
    def __init__(self):
        self.state = np.zeros(3, dtype=np.int64)

    def find(self, xp, x):
        return accel_find(xp, x, self.state)

    def reset(self):
        self.state[:] = 0

    @property
    def cache(self):
        return int(self.state[CACHE])

    @property
    def hit_count(self):
        return int(self.state[HIT_COUNT])

    @property
    def miss_count(self):
        return int(self.state[MISS_COUNT])


class CubicSplineModel:
    """Natural cubic spline through (x, y) with an accelerated point evaluator."""
    def __init__(self, x, y):
        x = np.array(x, dtype=np.float64)
        y = np.array(y, dtype=np.float64)
        if x.ndim != 1 or x.shape != y.shape:
            raise ValueError(f"x and y must be 1D arrays of equal length, got {x.shape} and {y.shape}")
        if len(x) < MIN_SAMPLES:
            raise ValueError(f"at least {MIN_SAMPLES} samples are needed for a cubic spline, got {len(x)}")
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise ValueError("samples must be finite")
        if np.any(np.diff(x) <= 0):
            raise ValueError("x must be strictly increasing")

        spline = CubicSpline(x, y, bc_type='natural', extrapolate=False)
        self.x = x
        self.coefficients = np.ascontiguousarray(spline.c)
        self.accelerator = SearchAccelerator()

    def __len__(self):
        return len(self.x)

    def copy(self):
        """Independent model with the same knots and coefficients and a fresh accelerator."""
        other = CubicSplineModel.__new__(CubicSplineModel)
        other.x = self.x.copy()
        other.coefficients = self.coefficients.copy()
        other.accelerator = SearchAccelerator()
        return other

    def __call__(self, s):
        """Evaluate at a single point inside [x[0], x[-1]]."""
        return spline_eval(self.x, self.coefficients, float(s), self.accelerator.state)

    def evaluate_clamped(self, s, y_lo, y_hi):
        """Evaluate an array of points, holding y_lo / y_hi outside the knot range."""
        s_array = np.ascontiguousarray(np.atleast_1d(s), dtype=np.float64)
        return spline_eval_clamped(self.x, self.coefficients, s_array,
                                   float(y_lo), float(y_hi), self.accelerator.state)


@njit
def bsearch(xp, x, index_lo, index_hi):
    """Index i in [index_lo, index_hi) with xp[i] <= x < xp[i+1]."""
    ilo = index_lo
    ihi = index_hi
    while ihi > ilo + 1:
        i = (ihi + ilo) // 2
        if xp[i] > x:
            ihi = i
        else:
            ilo = i
    return ilo


@njit
def accel_find(xp, x, state):
    """
    Locate the interval holding x, starting from the cached index.

    Parameters:
    - xp: 1D array of floats, the knots, must be strictly increasing.
    - x: float, the query point.
    - state: int64 array [cache, misses, hits], updated in place.

    Returns:
    - int, the interval index, at most len(xp) - 2.
    """
    x_index = state[CACHE]
    if x_index > len(xp) - 2:
        # cache left over from a longer table
        x_index = 0
        state[CACHE] = 0
    if x < xp[x_index]:
        state[MISS_COUNT] += 1
        state[CACHE] = bsearch(xp, x, 0, x_index)
    elif x >= xp[x_index + 1]:
        state[MISS_COUNT] += 1
        state[CACHE] = bsearch(xp, x, x_index, len(xp) - 1)
    else:
        state[HIT_COUNT] += 1
    return state[CACHE]


@njit
def spline_eval(xp, c, x, state):
    i = accel_find(xp, x, state)
    dx = x - xp[i]
    return ((c[0, i] * dx + c[1, i]) * dx + c[2, i]) * dx + c[3, i]


@njit
def spline_eval_clamped(xp, c, xs, y_lo, y_hi, state):
    n = len(xp)
    result = np.empty(len(xs))
    for k in range(len(xs)):
        x = xs[k]
        if x < xp[0]:
            result[k] = y_lo
        elif x > xp[n - 1]:
            result[k] = y_hi
        else:
            result[k] = spline_eval(xp, c, x, state)
    return result
