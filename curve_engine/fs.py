"""Filesystem helpers: YAML loading and atomic CSV export.

Usage:
    from curve_engine import fs
    raw = fs.load_yaml("curves.yaml")
    fs.atomic_save_csv(rows, "out/points.csv", header="name,index,x,y")

All paths use pathlib.Path.  Writes go to a temporary file in the target
directory and are renamed into place, so readers never see partial files.
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import yaml


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content (empty dict for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
    return data if data is not None else {}


def atomic_save_csv(
    rows: np.ndarray,
    path: Union[str, Path],
    header: str = "",
    fmt: Union[str, list] = "%.17g",
    tmp_suffix: str = ".tmp"
) -> None:
    """Write a 2-D array as CSV atomically (tmp → fsync → rename).

    Parameters
    ----------
    rows : np.ndarray
        Shape (N, K); string columns need a matching ``fmt`` list
    path : Union[str, Path]
        Target file path
    header : str
        Header line without the leading comment marker
    fmt : str or list
        ``np.savetxt`` format(s)
    """
    path = Path(path)
    ensure_dir(path.parent)
    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'w', encoding='utf-8', newline='') as f:
            np.savetxt(f, rows, delimiter=',', header=header, comments='', fmt=fmt)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e
