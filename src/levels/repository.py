import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .codec import YAML_SUFFIXES, load_level_file
from .models import Level, LevelKind

logger = logging.getLogger(__name__)

LEVEL_SUFFIXES = {".json"} | YAML_SUFFIXES


class LevelRepository:
    """
    Holds decoded levels keyed by id.

    Build one per application and pass it to whatever needs levels; nothing
    here is global.
    """

    def __init__(self, levels: Iterable[Level] = ()):
        self._levels: Dict[str, Level] = {}
        for level in levels:
            self.add(level)

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "LevelRepository":
        """
        Load every JSON/YAML level file in `directory` (not recursive).

        Files are read in name order, so a later file wins on duplicate ids.

        Raises:
            FileNotFoundError: If the directory does not exist
            LevelDecodeError: If any file is not a valid level
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Level directory not found: {directory}")

        repo = cls()
        for path in sorted(directory.iterdir()):
            if path.suffix.lower() in LEVEL_SUFFIXES:
                repo.add(load_level_file(path))

        logger.info("Loaded %d levels from %s", len(repo), directory)
        return repo

    def add(self, level: Level) -> None:
        if level.id in self._levels:
            logger.warning("Replacing level with duplicate id %s", level.id)
        self._levels[level.id] = level

    def get(self, level_id: str) -> Optional[Level]:
        return self._levels.get(level_id)

    def by_kind(self, kind: LevelKind) -> List[Level]:
        return [level for level in self._levels.values() if level.kind == kind]

    def ids(self) -> List[str]:
        return list(self._levels)

    def __contains__(self, level_id: object) -> bool:
        return level_id in self._levels

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels.values())

    def __len__(self) -> int:
        return len(self._levels)
