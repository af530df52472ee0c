"""
Flat-file digest store and the published digest index.

Layout under ``data_dir``::

    daily/26-02-05.json
    weekly/26-6.json
    monthly/26-02.json
    index.json
"""

from collections.abc import Iterator
from pathlib import Path

import orjson
from pydantic import ValidationError

from .logging import get_logger, log_error
from .models import Digest, DigestIndex, IndexEntry, PeriodKind
from .utils import ensure_directory, utc_now

logger = get_logger(__name__)

INDEX_FILENAME = "index.json"


def _dump(model) -> bytes:
    return orjson.dumps(
        model.model_dump(mode="json", by_alias=True),
        option=orjson.OPT_INDENT_2,
    )


class DigestStore:
    """Reads and writes digests as JSON files, one per period."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def kind_dir(self, kind: PeriodKind) -> Path:
        return self.data_dir / PeriodKind(kind).value

    def path_for(self, kind: PeriodKind, digest_id: str) -> Path:
        return self.kind_dir(kind) / f"{digest_id}.json"

    @property
    def index_path(self) -> Path:
        return self.data_dir / INDEX_FILENAME

    def save(self, digest: Digest) -> Path:
        """Write a digest, replacing any earlier copy of the same period."""
        ensure_directory(self.kind_dir(digest.type))
        path = self.path_for(digest.type, digest.id)
        path.write_bytes(_dump(digest))
        logger.info(
            "Digest saved",
            path=str(path),
            digest_id=digest.id,
            kind=digest.type.value,
            total_articles=digest.total_articles,
        )
        return path

    def load(self, kind: PeriodKind, digest_id: str) -> Digest:
        """Load one digest.

        Raises:
            FileNotFoundError: No digest stored under that id
        """
        path = self.path_for(kind, digest_id)
        return Digest.model_validate(orjson.loads(path.read_bytes()))

    def iter_digests(self, kind: PeriodKind) -> Iterator[Digest]:
        """Every readable digest of one kind; broken files are logged and skipped."""
        directory = self.kind_dir(kind)
        if not directory.is_dir():
            return
        for path in sorted(directory.glob("*.json")):
            try:
                yield Digest.model_validate(orjson.loads(path.read_bytes()))
            except (OSError, orjson.JSONDecodeError, ValidationError) as e:
                logger.warning(**log_error(e, context="skipping unreadable digest", path=str(path)))

    def build_index(self) -> DigestIndex:
        """Index of stored digests that contain at least one article."""
        lists: dict[str, list[IndexEntry]] = {}
        for kind in PeriodKind:
            entries = [
                IndexEntry.from_digest(digest)
                for digest in self.iter_digests(kind)
                if digest.total_articles > 0
            ]
            entries.sort(key=lambda entry: entry.start, reverse=True)
            lists[kind.value] = entries
        return DigestIndex(last_updated=utc_now(), **lists)

    def write_index(self) -> DigestIndex:
        index = self.build_index()
        ensure_directory(self.data_dir)
        self.index_path.write_bytes(_dump(index))
        logger.info(
            "Index updated",
            daily=len(index.daily),
            weekly=len(index.weekly),
            monthly=len(index.monthly),
        )
        return index

    def load_index(self) -> DigestIndex:
        """The written index, or an empty one if none exists yet."""
        if not self.index_path.exists():
            return DigestIndex(last_updated=utc_now())
        return DigestIndex.model_validate(orjson.loads(self.index_path.read_bytes()))
