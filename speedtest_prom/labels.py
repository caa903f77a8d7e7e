"""Label string parsing and label name checks."""
from typing import Dict, Iterable, List, Tuple
import re

from speedtest_prom.errors import FormatError

Label = Tuple[str, str]

LABEL_NAME_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


def parse_labels(label_str: str) -> List[Label]:
    """
    Parse a label string of the form "key1=value1,key2=value2".

    Keys and values are stripped of surrounding whitespace. An empty string
    yields no labels.

    Raises:
        FormatError: if a pair does not contain exactly one "=".
    """
    labels: List[Label] = []
    if label_str == "":
        return labels

    for pair in label_str.split(","):
        if pair.count("=") != 1:
            raise FormatError(f"invalid label format: {pair}")
        name, value = pair.split("=", 1)
        labels.append((name.strip(), value.strip()))

    return labels


def labels_from_mapping(mapping: Dict[str, str]) -> List[Label]:
    """Convert a label mapping (e.g. from a config file) to label pairs."""
    return [(str(name), str(value)) for name, value in mapping.items()]


def invalid_label_names(labels: Iterable[Label]) -> List[str]:
    """
    Return label names that are not Prometheus-safe.

    Label names must match [a-zA-Z_][a-zA-Z0-9_]*
    """
    return [name for name, _ in labels if not LABEL_NAME_PATTERN.match(name)]


def duplicate_label_names(labels: Iterable[Label]) -> List[str]:
    """Return names that occur more than once, in first-seen order."""
    seen = set()
    duplicates: List[str] = []
    for name, _ in labels:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates
