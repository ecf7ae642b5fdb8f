"""
Spectrum utilities for interpolation and file operations.

Tables are plain text: one or more header lines starting with '#',
followed by whitespace-separated numeric columns, one row per sample.
"""

import numpy as np
import pandas as pd
from scipy.interpolate import interp1d

from .errors import RangeError, IOFailure


def save_to_file(path, columns, header_comment):
    """Save equal-length columns as a whitespace-separated table.

    Parameters
    ----------
    path : str
        Output file path
    columns : sequence of array-like
        Columns to write, e.g. (energies, flux, flux_err)
    header_comment : str
        Header text; every line is written with a '# ' prefix

    Raises
    ------
    ValueError
        If the columns differ in length
    IOFailure
        If the file cannot be written
    """
    columns = [np.asarray(c, dtype=float) for c in columns]
    lengths = {len(c) for c in columns}
    if len(lengths) > 1:
        raise ValueError(f"All columns must have the same length, got {sorted(lengths)}")
    try:
        np.savetxt(path, np.column_stack(columns), header=header_comment, comments="# ")
    except OSError as err:
        raise IOFailure(f"Could not write table to {path}: {err}") from err


def read_table(path):
    """Read a table written by ``save_to_file``.

    Returns
    -------
    NDArray
        2D float array with one column per table column

    Raises
    ------
    IOFailure
        If the file cannot be read
    """
    try:
        df = pd.read_csv(path, sep=r"\s+", comment="#", header=None)
    except (OSError, pd.errors.EmptyDataError) as err:
        raise IOFailure(f"Could not read table from {path}: {err}") from err
    return df.to_numpy(dtype=float)


class OneDInterpolator:
    """Linear interpolation of a tabulated function.

    Parameters
    ----------
    source : str or array-like
        Table file (first column x, second column y) or the x values
    y : array-like, optional
        y values, if ``source`` holds the x values
    """

    def __init__(self, source, y=None):
        if y is None:
            data = read_table(source)
            self.source = str(source)
            x, y = data[:, 0], data[:, 1]
        else:
            self.source = "<array>"
            x = source
        self.x = np.asarray(x, dtype=float)
        self.y = np.asarray(y, dtype=float)
        if self.x.size < 2 or np.any(np.diff(self.x) <= 0):
            raise ValueError(f"Interpolation nodes in {self.source} must be strictly increasing")
        self._interp = interp1d(self.x, self.y, kind="linear")

    def lower(self):
        return self.x[0]

    def upper(self):
        return self.x[-1]

    def interpolate(self, x):
        """Interpolated value(s) at x.

        Raises
        ------
        RangeError
            If any x lies outside [lower(), upper()]
        """
        x_arr = np.asarray(x, dtype=float)
        if np.any(x_arr < self.lower()) or np.any(x_arr > self.upper()):
            raise RangeError(
                f"Interpolation point(s) outside [{self.lower()}, {self.upper()}] of {self.source}")
        value = self._interp(x_arr)
        return float(value) if value.ndim == 0 else value

    __call__ = interpolate


__all__ = [
    'save_to_file',
    'read_table',
    'OneDInterpolator',
]
