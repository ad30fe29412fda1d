"""
Directory layout for v8kit.

Cargo gives every build script a private OUT_DIR such as::

    target/debug/build/rusty_v8-d9e5a424d4f96994/out

Downloaded tools must outlive that hash-named directory so that a rebuild
with different features does not refetch them. They go into the profile's
target directory (``target/debug`` above), three levels up from OUT_DIR:

    target/debug/
        clang/                      : Bundled clang (update.py --output-dir)
        gn_ninja_binaries/          : gn_ninja_binaries.py --dir
            gn_ninja_binaries/<tag>/gn, ninja
    OUT_DIR/
        gn_out/                     : Generated build graph
            args.gn
            build.ninja
"""

from pathlib import Path

from .exceptions import ConfigurationError, SourceTreeMissingError

CLANG_DIR_NAME = "clang"
GN_NINJA_DIR_NAME = "gn_ninja_binaries"
GN_OUT_DIR_NAME = "gn_out"

# Any file of the vendored checkout proves `git submodule update` has run.
SOURCE_TREE_MARKER = Path("buildtools") / "third_party" / "libc++" / "trunk" / "src"


class BuildRootResolver:
    """
    Resolve the shared target directory and the scratch areas inside it.

    Tests substitute a resolver rooted in a temporary directory.

    Example:
        >>> resolver = BuildRootResolver(Path("/w/target/debug/build/x-1234/out"))
        >>> resolver.target_dir()
        PosixPath('/w/target/debug')
    """

    # OUT_DIR -> build/<pkg-hash>/out -> target/<profile>
    PARENT_LEVELS = 3

    def __init__(self, out_dir: Path):
        """
        Initialize resolver.

        Args:
            out_dir: Absolute cargo OUT_DIR
        """
        self.out_dir = Path(out_dir)

    def target_dir(self) -> Path:
        """
        Get the profile target directory shared by all build scripts.

        Raises:
            ConfigurationError: If OUT_DIR is too shallow to have one
        """
        parents = self.out_dir.parents
        if len(parents) < self.PARENT_LEVELS:
            raise ConfigurationError(
                f"OUT_DIR is not inside a cargo target directory: {self.out_dir}"
            )
        return parents[self.PARENT_LEVELS - 1]

    def scratch_dir(self, name: str) -> Path:
        """Get a named scratch directory under the target directory."""
        return self.target_dir() / name

    def clang_dir(self) -> Path:
        return self.scratch_dir(CLANG_DIR_NAME)

    def gn_ninja_dir(self) -> Path:
        return self.scratch_dir(GN_NINJA_DIR_NAME)

    def gn_out_dir(self) -> Path:
        return self.out_dir / GN_OUT_DIR_NAME


def ensure_source_tree(root_dir: Path) -> Path:
    """
    Check that the vendored V8 checkout exists.

    Args:
        root_dir: Project root (CARGO_MANIFEST_DIR)

    Returns:
        Path to the marker directory

    Raises:
        SourceTreeMissingError: If the submodules have not been fetched
    """
    marker = Path(root_dir) / SOURCE_TREE_MARKER
    if not marker.is_dir():
        raise SourceTreeMissingError(str(SOURCE_TREE_MARKER))
    return marker
