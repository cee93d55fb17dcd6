import os
import posixpath
from pathlib import Path
from typing import Optional, Tuple
import aiofiles
import aiofiles.os
from posts_server.app.errors import InvalidPath, ServerIOError
from posts_server.logger_config import setup_logger

logger = setup_logger()


def to_relative_path(url_path: str) -> str:
    """Normalize a decoded URL path into a root-relative path.

    Leading slashes are stripped before '.' and '..' segments are collapsed, so
    a path that climbs above its start keeps its leading '..' and is rejected
    when resolved against a root. Returns an empty string when nothing remains.
    """
    stripped = url_path.lstrip("/")
    if not stripped:
        return ""
    normalized = posixpath.normpath(stripped)
    if normalized == ".":
        return ""
    return normalized


class StorageManager:
    def __init__(self, resources_dir: Path, posts_dir: Path):
        self.resources_dir = Path(resources_dir)
        self.posts_dir = Path(posts_dir)

    @property
    def roots(self) -> Tuple[Path, Path]:
        """Roots searched by GET, in lookup order."""
        return self.resources_dir, self.posts_dir

    async def initialize(self):
        """Create both roots if they don't exist."""
        logger.info("Initializing storage manager...")
        self.resources_dir.mkdir(exist_ok=True, parents=True)
        self.posts_dir.mkdir(exist_ok=True, parents=True)
        logger.debug(f"Storage directories created/verified: {self.resources_dir}, {self.posts_dir}")

    def resolve(self, root: Path, relative_path: str) -> Path:
        """Join a root-relative path to a root, refusing anything that lands outside it."""
        if "\x00" in relative_path:
            raise InvalidPath()

        root_abs = os.path.abspath(root)
        candidate = os.path.abspath(os.path.join(root_abs, relative_path))
        # Compare whole components so that 'posts2' is not taken as inside 'posts'
        if os.path.commonpath([root_abs, candidate]) != root_abs:
            logger.warning(f"Rejected path outside {root_abs}: {relative_path}")
            raise InvalidPath()
        return Path(candidate)

    async def locate(self, relative_path: str) -> Optional[Path]:
        """Find a regular file under the resources root, falling back to the posts root."""
        for root in self.roots:
            candidate = self.resolve(root, relative_path)
            if await aiofiles.os.path.isfile(candidate):
                return candidate
        return None

    async def write_post(self, target: Path, text: str):
        """Write (overwrite) a post, creating its parent directories."""
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating directories for {target}: {str(e)}", exc_info=True)
            raise ServerIOError("Failed to create directories")

        try:
            async with aiofiles.open(target, 'w', encoding='utf-8', newline='') as f:
                await f.write(text)
        except OSError as e:
            logger.error(f"Error writing post {target}: {str(e)}", exc_info=True)
            raise ServerIOError("Failed to write file")

        logger.debug(f"Wrote {len(text)} characters to {target}")

    def display_path(self, target: Path) -> str:
        """Path reported to clients, relative to the directory holding the posts root."""
        base = os.path.abspath(self.posts_dir.parent)
        return Path(os.path.relpath(target, base)).as_posix()
