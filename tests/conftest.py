import io
import pytest

from file_inventory.scanning.filesystem import DirectoryWalker


@pytest.fixture
def sample_tree(tmp_path):
    """
    root/
      a.txt, b.bin
      sub/c.txt
      sub/deeper/d.txt
    """
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "b.bin").write_bytes(b"\x00\x01\x02" * 1000)
    (root / "sub" / "c.txt").write_text("charlie")
    (root / "sub" / "deeper" / "d.txt").write_text("delta")
    return root


@pytest.fixture
def run_walk():
    """Walks a tree into memory and returns (lines, outcome)."""
    def _run(root, **kwargs):
        sink = io.StringIO()
        outcome = DirectoryWalker(**kwargs).walk(root, sink)
        return sink.getvalue().splitlines(), outcome
    return _run
