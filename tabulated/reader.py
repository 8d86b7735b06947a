import os
import numpy as np
from tabulated.errors import DataFileNotFoundError, DataFileUnreadableError, MalformedInputError


class TwoColumnReader:
    def __init__(self, path):
        """
        Initialize TwoColumnReader with the path of a two-column text table.

        Parameters:
        -----------
        path : str or os.PathLike
            File holding whitespace separated x y pairs
        """
        self.path = os.fspath(path)

    def read(self):
        """
        Read the (x, y) pairs in file order.

        A trailing x without its y is dropped.

        Returns:
        --------
        tuple of numpy.ndarray
            Arguments and function values
        """
        if not os.path.isfile(self.path):
            raise DataFileNotFoundError(f"No such data file: {self.path}")
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                tokens = f.read().split()
        except (OSError, UnicodeDecodeError) as e:
            raise DataFileUnreadableError(f"Can not read data file {self.path}: {e}") from e

        values = np.empty(len(tokens) - len(tokens) % 2)
        for i in range(len(values)):
            try:
                values[i] = float(tokens[i])
            except ValueError:
                raise MalformedInputError(
                    f"{self.path}: token {i + 1} ({tokens[i]!r}) is not a number") from None
        return values[0::2].copy(), values[1::2].copy()


def read_two_column_data(path):
    return TwoColumnReader(path).read()
