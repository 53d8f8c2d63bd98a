"""
Sample store for per-label gas cost samples.
"""

from typing import Dict, Iterator, List, Tuple


class SampleStore:
    """Maps scenario labels to gas samples in execution order.

    One store is created per benchmark run and passed explicitly to every
    collector and driver that records into it.
    """

    def __init__(self):
        self._samples: Dict[str, List[int]] = {}

    def record(self, label: str, sample: int) -> None:
        """Append a sample to a label's sequence, creating it if absent."""
        self._samples.setdefault(label, []).append(sample)

    def entries(self) -> Iterator[Tuple[str, List[int]]]:
        """Iterate (label, samples) pairs in label insertion order."""
        for label, samples in self._samples.items():
            yield label, samples

    def samples(self, label: str) -> List[int]:
        """Get a copy of one label's samples (empty if never recorded)."""
        return list(self._samples.get(label, []))

    def labels(self) -> List[str]:
        return list(self._samples)

    def total_samples(self) -> int:
        return sum(len(samples) for samples in self._samples.values())

    def __contains__(self, label: str) -> bool:
        return label in self._samples

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"SampleStore(labels={len(self)}, samples={self.total_samples()})"
