"""Read-only reference database of GPU capability profiles."""

import json
import logging
from collections import Counter
from collections.abc import Iterator, Mapping
from functools import lru_cache
from importlib import resources
from pathlib import Path

from modelfit.gpu.profile import CapabilityProfile

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_RESOURCE = "data/gpu_database.json"


class ReferenceDatabase(Mapping[str, CapabilityProfile]):
    """Mapping from normalized GPU name to capability profile.

    Iteration follows insertion order, which is the order entries appear in
    the artifact (and the order the builder first saw them).
    """

    def __init__(self, profiles: Mapping[str, CapabilityProfile] | None = None):
        self._profiles: dict[str, CapabilityProfile] = dict(profiles or {})

    def __getitem__(self, name: str) -> CapabilityProfile:
        return self._profiles[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __repr__(self) -> str:
        return f"ReferenceDatabase({len(self)} GPUs)"

    def vendor_counts(self) -> dict[str, int]:
        """Count entries per vendor."""
        counts = Counter(profile.vendor.value for profile in self._profiles.values())
        return dict(counts)

    def to_dict(self) -> dict[str, dict]:
        return {name: profile.to_dict() for name, profile in self._profiles.items()}

    def to_json(self, path: str | Path) -> None:
        """Write the database artifact.

        Args:
            path: Destination file; parent directories are created
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")

    @classmethod
    def from_dict(cls, data: Mapping[str, dict]) -> "ReferenceDatabase":
        """Parse artifact data, skipping malformed entries."""
        profiles: dict[str, CapabilityProfile] = {}
        for name, entry in data.items():
            if name in profiles:
                continue
            try:
                profiles[name] = CapabilityProfile.from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed GPU entry %r: %s", name, e)
        return cls(profiles)

    @classmethod
    def from_json(cls, path: str | Path) -> "ReferenceDatabase":
        """Load a database artifact from disk.

        Raises:
            OSError: If the file cannot be read
            json.JSONDecodeError: If the file is not valid JSON
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        database = cls.from_dict(data)
        logger.debug("Loaded %d GPUs from %s", len(database), path)
        return database


@lru_cache(maxsize=1)
def load_default() -> ReferenceDatabase:
    """Load the reference database bundled with the package."""
    resource = resources.files("modelfit.gpu").joinpath(DEFAULT_DATABASE_RESOURCE)
    data = json.loads(resource.read_text(encoding="utf-8"))
    database = ReferenceDatabase.from_dict(data)
    logger.debug("Loaded bundled GPU database with %d entries", len(database))
    return database


def load_database(path: str | Path | None = None) -> ReferenceDatabase:
    """Load ``path`` if given, otherwise the bundled database."""
    if path is None:
        return load_default()
    return ReferenceDatabase.from_json(Path(path).expanduser())
