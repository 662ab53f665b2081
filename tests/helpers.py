from typing import List


def split_row(line: str, sep: str = ",") -> List[str]:
    """Splits a quoted CSV line produced by the scanner (no escaping involved)."""
    assert line.startswith('"') and line.endswith('"'), line
    return line[1:-1].split(f'"{sep}"')
