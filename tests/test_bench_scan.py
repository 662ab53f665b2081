import json

import bench_scan


def test_benchmark_writes_results(sample_tree, tmp_path, capsys):
    out = tmp_path / "bench" / "results.json"
    bench_scan.main([str(sample_tree), "--workers", "1", "2", "--repeats", "2", "--output", str(out)])

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["workers"] == [1, 2]
    assert [r["workers"] for r in payload["results"]] == [1, 2]
    assert all(len(r["times"]) == 2 for r in payload["results"])
    assert "1 workers:" in capsys.readouterr().out
