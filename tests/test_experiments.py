import csv

import pytest

import experiments


@pytest.mark.parametrize("name", sorted(experiments.GENERATOR_REGISTRY))
def test_generators_are_deterministic_and_nul_free(name):
    a = experiments.generate_dataset(name, 2048, seed=5)
    b = experiments.generate_dataset(name, 2048, seed=5)
    assert a == b
    assert len(a) == 2048
    assert 0 not in a


def test_unknown_generator():
    with pytest.raises(ValueError):
        experiments.generate_dataset("nope", 10, seed=0)


def test_run_one():
    data = experiments.generate_dataset("english_like", 4096, seed=1)
    row = experiments.run_one(data)
    assert row.correctness_ok == 1
    assert row.file_size_bytes == 4096
    assert 0 <= row.pad_bits <= 7
    assert 0 < row.header_bytes < row.encoded_bytes
    assert row.compression_ratio < 1.0


def test_main_writes_csv_and_charts(tmp_path, capsys):
    outdir = tmp_path / "results"
    rc = experiments.main([
        "--outdir", str(outdir), "--runs", "2",
        "--exp1_size_kb", "1", "--exp1_generators", "english_like,zipf60",
        "--exp2_min_kb", "1", "--exp2_max_kb", "2", "--exp2_generators", "repetitive90",
    ])
    assert rc == 0

    with (outdir / "metrics.csv").open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    # exp1: 2 generators x 2 runs, exp2: 2 sizes x 2 runs
    assert len(rows) == 8
    assert all(r["correctness_ok"] == "1" for r in rows)

    with (outdir / "summary.csv").open(encoding="utf-8") as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 4
    assert all(float(r["correctness_ok_rate"]) == 1.0 for r in summary)

    assert (outdir / "exp1_compression_ratio.png").exists()
    assert (outdir / "exp2_total_ms.png").exists()
    assert "Correctness rate across all runs: 1.000" in capsys.readouterr().out


def test_main_without_plots(tmp_path):
    outdir = tmp_path / "results"
    rc = experiments.main(["--outdir", str(outdir), "--runs", "1", "--no_plots", "--no_exp2",
                           "--exp1_size_kb", "1", "--exp1_generators", "uniform60"])
    assert rc == 0
    assert (outdir / "metrics.csv").exists()
    assert not list(outdir.glob("*.png"))
