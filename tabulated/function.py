import sys
import numpy as np
from maths.interpolater import CubicSplineModel
from tabulated.errors import (DataFileNotFoundError, DataFileUnreadableError, InvalidDomainError,
                              MalformedInputError, NotInitializedError, UnorderedSamplesError)
from tabulated.reader import read_two_column_data

DOMAIN_EDGE_EPSILON = 1e-5
EXIT_LOAD_FAILURE = 1
DEFAULT_N_POINTS = 300


class InterpolatedFunction:
    """
    Tabulated 1D real function interpolated with a natural cubic spline.

    Arguments below the first sample return the first function value, above the
    last sample the last one. In unity mode the function is 1 everywhere.

    Every evaluation updates the spline's search accelerator, so an instance
    must not be shared between threads without external locking.
    """
    def __init__(self):
        self._spline = None
        self._reset()

    def _reset(self):
        self._x_min = 0.0
        self._x_max = 0.0
        self._y_at_min = 0.0
        self._y_at_max = 0.0
        self._is_unity = False
        self._is_init = False

    def teardown(self):
        """Release the spline and return to the uninitialized state. Idempotent."""
        self._spline = None
        self._reset()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.teardown()
        return False

    def __copy__(self):
        return self.__deepcopy__({})

    def __deepcopy__(self, memo):
        other = InterpolatedFunction()
        if self._spline is not None:
            other._spline = self._spline.copy()
        other._x_min, other._x_max = self._x_min, self._x_max
        other._y_at_min, other._y_at_max = self._y_at_min, self._y_at_max
        other._is_unity, other._is_init = self._is_unity, self._is_init
        memo[id(self)] = other
        return other

    # Initialization

    def init_from_file(self, path):
        """
        Load two-column data from file and build the spline.

        Returns False, leaving the instance uninitialized, if the file is missing
        or can not be read. Malformed content raises MalformedInputError.
        """
        self.teardown()
        try:
            x, y = read_two_column_data(path)
        except (DataFileNotFoundError, DataFileUnreadableError):
            return False
        self.init_from_samples(x, y)
        return True

    def init_from_file_or_abort(self, path):
        """Like init_from_file, but terminates the process if the file can not be loaded."""
        if not self.init_from_file(path):
            print(f"Can not initialize interp_funct using file {path} !", file=sys.stderr)
            sys.exit(EXIT_LOAD_FAILURE)

    def init_from_samples(self, x, y):
        self.teardown()
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        # Samples are taken in the given order, unordered input is rejected rather than sorted.
        if x.ndim == 1 and x.shape == y.shape and np.any(np.diff(x) <= 0):
            raise UnorderedSamplesError("argument values must be strictly increasing")
        try:
            spline = CubicSplineModel(x, y)
        except ValueError as e:
            raise MalformedInputError(str(e)) from e

        self._spline = spline
        self._x_min = float(x[0])
        self._x_max = float(x[-1])
        self._y_at_min = float(y[0])
        self._y_at_max = float(y[-1])
        self._is_unity = False
        self._is_init = True

    def init_as_unity(self, x_min, x_max):
        """Set f(x) = 1 on [x_min, x_max]."""
        self.teardown()
        if x_min > x_max:
            raise InvalidDomainError(f"x_min ({x_min}) is greater than x_max ({x_max})")
        self._x_min = float(x_min)
        self._x_max = float(x_max)
        self._is_unity = True
        self._is_init = True

    # State

    @property
    def is_initialized(self):
        return self._is_init

    @property
    def is_unity(self):
        return self._is_unity

    @property
    def x_min(self):
        return self._x_min

    @property
    def x_max(self):
        return self._x_max

    @property
    def y_at_min(self):
        return self._y_at_min

    @property
    def y_at_max(self):
        return self._y_at_max

    @property
    def spline(self):
        return self._spline

    def _check_init(self):
        if not self._is_init:
            raise NotInitializedError("InterpolatedFunction is not initialized")

    # Borders of the interval, widened by a relative factor so that sampling
    # from border to border covers the whole table. Zero borders stay zero.

    def domain_min(self):
        self._check_init()
        if self._x_min > 0.0:
            return self._x_min * (1.0 - DOMAIN_EDGE_EPSILON)
        return self._x_min * (1.0 + DOMAIN_EDGE_EPSILON)

    def domain_max(self):
        self._check_init()
        if self._x_max > 0.0:
            return self._x_max * (1.0 + DOMAIN_EDGE_EPSILON)
        return self._x_max * (1.0 - DOMAIN_EDGE_EPSILON)

    # Evaluation

    def evaluate(self, x):
        self._check_init()
        if self._is_unity:
            return 1.0
        if x < self._x_min:
            return self._y_at_min
        if x > self._x_max:
            return self._y_at_max
        return float(self._spline(x))

    def __call__(self, s):
        # Handle both scalar and array inputs
        if np.isscalar(s):
            return self.evaluate(s)
        self._check_init()
        s_array = np.asarray(s, dtype=np.float64)
        if self._is_unity:
            return np.ones_like(s_array)
        result = self._spline.evaluate_clamped(s_array.ravel(), self._y_at_min, self._y_at_max)
        return result.reshape(s_array.shape)

    def resample(self, n_points=DEFAULT_N_POINTS):
        """
        Sample the function on n_points equally spaced arguments starting at
        domain_min(), with step (domain_max() - domain_min()) / n_points.
        """
        xi = self.domain_min()
        xf = self.domain_max()
        xs = xi + np.arange(n_points) * (xf - xi) / n_points
        return xs, self(xs)
