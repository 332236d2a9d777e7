import pytest


@pytest.fixture
def trace_path(tmp_path):
    """Write trace lines to a file and return its path"""
    def write(*lines):
        path = tmp_path / "trace.txt"
        path.write_text("".join(f"{line}\n" for line in lines))
        return str(path)
    return write
