import pytest

from hyperplonk.__main__ import bench, main, parse_args


def test_defaults():
    args = parse_args([])
    assert args.variant == "baseline"
    assert (args.min_log, args.max_log) == (2, 4)
    assert args.jobs == 1
    assert args.workers == 0


@pytest.mark.parametrize("argv", [["--min-log", "0"], ["--min-log", "3", "--max-log", "2"]])
def test_bad_range(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_bench_reports_plus_sizes():
    variant, log_size, timings, sizes = bench("plus", 1, seed=5)
    assert (variant, log_size) == ("plus", 1)
    assert "Open" in timings
    assert sizes["wiring_openings"] == 9


def test_main_prints_every_invocation(capsys):
    main(["--variant", "both", "--min-log", "1", "--max-log", "2", "--seed", "3", "--workers", "2"])
    out = capsys.readouterr().out
    for variant in ("baseline", "plus"):
        for log_size in (1, 2):
            assert f"== {variant}, 2^{log_size} gates" in out
    assert "wiring_openings=6" in out
    assert "wiring_openings=9" in out
