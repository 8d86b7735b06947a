import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest


@pytest.fixture
def data_file(tmp_path):
    """Write a data file from text and return its path."""
    def _write(text, name="table.dat"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


@pytest.fixture
def square_file(data_file):
    return data_file("0.0 0.0\n1.0 1.0\n2.0 4.0\n")


@pytest.fixture
def sine_samples():
    x = np.linspace(0.5, 2.0 * np.pi, 40)
    return x, np.sin(x)


@pytest.fixture
def sine_file(data_file, sine_samples):
    x, y = sine_samples
    return data_file("".join(f"{float(xi)!r} {float(yi)!r}\n" for xi, yi in zip(x, y)), name="sine.dat")
