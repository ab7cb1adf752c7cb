"""
FileWalker - Enumerates regular files below a root path.
"""

import logging
import os
from typing import Iterator, List, Optional


class FileWalker:
    """
    Walks a directory tree depth-first, visiting the entries of each
    directory in lexical order, and yields regular files only.
    
    A root that is itself a file yields just that file.
    """
    
    def __init__(self, follow_symlinks: bool = False, logger: Optional[logging.Logger] = None):
        self.follow_symlinks = follow_symlinks
        self.logger = logger or logging.getLogger(__name__)
    
    def walk(self, root: str) -> Iterator[str]:
        """
        Yield file paths under root.
        
        Raises:
            FileNotFoundError: If root doesn't exist
            OSError: If a directory can't be listed
        """
        if not os.path.exists(root):
            raise FileNotFoundError(root)
        
        if not os.path.isdir(root):
            if os.path.isfile(root):
                yield root
            return
        
        yield from self._walk_dir(root)
    
    def _walk_dir(self, directory: str) -> Iterator[str]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        
        for entry in entries:
            if entry.is_dir(follow_symlinks=self.follow_symlinks):
                yield from self._walk_dir(entry.path)
            elif entry.is_file():
                yield entry.path
            else:
                self.logger.debug(f"Skipping non-regular file: {entry.path}")
    
    def collect(self, root: str) -> List[str]:
        """Return all files under root as a list, in traversal order."""
        return list(self.walk(root))
