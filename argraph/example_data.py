"""
Synthetic dataset generator for the AR Graph Plotter.

Creates simulated cell-signature records for demos and tests: three
numeric fields (``lymphoid``, ``myeloid``, ``-log10P``) and one
categorical ``condition`` label drawn from a fixed set of seven.
Lymphoid / myeloid scores are sampled from condition-dependent ranges
and include negative values; ``-log10P`` comes from a p-value in
``[0.0001, 0.05]``.
"""

import json
import math
import os
import random
import time
from typing import List, Optional, Tuple

from .constants import (
    SYNTHETIC_CONDITIONS, SYNTHETIC_DESCRIPTION, SYNTHETIC_NAME_PREFIX,
    SYNTHETIC_P_RANGE, SYNTHETIC_RANGES,
)
from .data_model import Record


def _range_group(condition: str) -> str:
    if condition in ("L+", "L+F+", "L+M+"):
        return 'lymphoid_high'
    if condition in ("M+", "M+F+"):
        return 'myeloid_high'
    if condition == "F+":
        return 'fibro'
    return 'other'


def generate_synthetic_records(
    record_count: int,
    rng: Optional[random.Random] = None,
) -> List[Record]:
    """Generate *record_count* cell-signature records.

    Conditions cycle through ``SYNTHETIC_CONDITIONS`` in order, so every
    condition appears once *record_count* reaches seven.

    Raises ``ValueError`` if *record_count* is not a positive integer.
    """
    if isinstance(record_count, bool) or not isinstance(record_count, int) or record_count <= 0:
        raise ValueError(f"record count must be a positive integer, got {record_count!r}")
    rng = rng or random.Random()

    records: List[Record] = []
    for i in range(record_count):
        condition = SYNTHETIC_CONDITIONS[i % len(SYNTHETIC_CONDITIONS)]
        lymphoid_range, myeloid_range = SYNTHETIC_RANGES[_range_group(condition)]

        lymphoid = rng.uniform(*lymphoid_range)
        myeloid = rng.uniform(*myeloid_range)
        p_value = rng.uniform(*SYNTHETIC_P_RANGE)

        records.append({
            'lymphoid': lymphoid,
            'myeloid': myeloid,
            '-log10P': -math.log10(p_value),
            'condition': condition,
        })
    return records


def synthetic_dataset_name(timestamp: Optional[int] = None) -> str:
    """``SyntheticCellSignatures_<unix seconds>``."""
    if timestamp is None:
        timestamp = int(time.time())
    return f"{SYNTHETIC_NAME_PREFIX}_{timestamp}"


def write_synthetic_dataset(
    output_dir: str,
    record_count: int,
    name: Optional[str] = None,
    seed: Optional[int] = None,
) -> Tuple[str, str, str]:
    """Generate a synthetic dataset and write it as ``<name>.json``.

    Returns
    -------
    (path, name, description)
    """
    os.makedirs(output_dir, exist_ok=True)
    rng = random.Random(seed)
    name = name or synthetic_dataset_name()
    document = {
        'name': name,
        'description': SYNTHETIC_DESCRIPTION,
        'data': generate_synthetic_records(record_count, rng),
    }
    path = os.path.join(output_dir, f"{name}.json")
    with open(path, 'w', encoding='utf-8') as fh:
        json.dump(document, fh, indent=2)
    return path, name, SYNTHETIC_DESCRIPTION


if __name__ == '__main__':
    # Quick check: write a small dataset to the temp directory
    import tempfile
    out_dir = os.path.join(tempfile.gettempdir(), 'argraph_example')
    path, name, _ = write_synthetic_dataset(out_dir, 70, seed=42)
    print(f"  {name}: {path} ({os.path.getsize(path):,} bytes)")
