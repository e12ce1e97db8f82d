from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union


def _parse_name_entry(line: str) -> Optional[Tuple[int, str]]:
    # "3: 잎_역병" or "3: '잎_역병'"
    class_id, sep, name = line.partition(":")
    class_id = class_id.strip()
    if not sep or not class_id.isdigit():
        return None
    return int(class_id), name.strip().strip("'\"")


def load_labels(metadata_path: Union[str, Path]) -> List[str]:
    """
    Ordered label list (index == class id) from the model's `metadata.yaml`.

    Only the `names:` block is read, one `id: label` per line:

        names:
          0: 열매_잿빛곰팡이병
          1: 열매_흰가루병

    Ids must run 0..N-1 without gaps or repeats. Kept free of a PyYAML dependency.
    """

    path = Path(metadata_path)
    by_id: Dict[int, str] = {}
    in_names = False

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line == "names:":
            in_names = True
            continue
        if not in_names:
            continue
        if not raw[:1].isspace():
            # Next top-level key ends the block
            break

        entry = _parse_name_entry(line)
        if entry is None:
            continue
        class_id, name = entry
        if class_id in by_id:
            raise ValueError(f"Duplicate class id {class_id} in {path}")
        by_id[class_id] = name

    if not by_id:
        raise ValueError(f"No class names found in {path}")
    missing = sorted(set(range(len(by_id))) - set(by_id))
    if missing:
        raise ValueError(f"Class ids in {path} must be contiguous from 0; missing {missing}")
    return [by_id[i] for i in range(len(by_id))]
