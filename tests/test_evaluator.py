import random

from syslabs.cachelab import TransRegistry
from syslabs.evaluator import INT_MAX, SUBMIT_DESCRIPTION, Results, eval_perf, main, usage
from syslabs.trans import register_functions


def _registry():
    registry = TransRegistry()
    register_functions(registry)
    return registry


def test_eval_perf_32x32(capsys):
    registry = _registry()
    results = eval_perf(registry, 32, 32, 5, 1, 5, random.Random(7))
    assert results.funcid == 0
    assert results.correct is True
    submission, baseline = registry[0], registry[1]
    assert submission.correct and baseline.correct
    assert results.misses == submission.num_misses
    assert baseline.num_hits + baseline.num_misses == 2 * 32 * 32
    assert submission.num_misses < baseline.num_misses
    assert baseline.num_evictions <= baseline.num_misses
    assert "Step 2: Evaluating performance (s=5, E=1, b=5)" in capsys.readouterr().out


def test_eval_perf_wrong_submission(capsys):
    registry = TransRegistry()
    registry.register(lambda m, n, a, b: None, SUBMIT_DESCRIPTION)
    results = eval_perf(registry, 4, 4, 5, 1, 5, random.Random(1))
    assert results == Results(funcid=0, correct=False, misses=INT_MAX)
    assert registry[0].correct is False
    assert "Validation error at function 0!" in capsys.readouterr().out


def test_eval_perf_out_of_bounds_function_is_invalid(capsys):
    def overrun(m, n, a, b):
        b[m][0] = 1

    registry = TransRegistry()
    registry.register(overrun, "overrun")
    results = eval_perf(registry, 4, 4, 5, 1, 5, random.Random(1))
    assert results.funcid == -1
    assert registry[0].correct is False


def test_usage_mentions_limit():
    text = usage("prog")
    assert text.startswith("Usage: prog [-h] -M <rows> -N <cols>")
    assert "(max 256)" in text


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_main_missing_argument(capsys):
    assert main(["-N", "8"]) == 1
    assert "Error: Missing required argument" in capsys.readouterr().out


def test_main_too_large(capsys):
    assert main(["-M", "300", "-N", "8"]) == 1
    assert "Error: M or N exceeds 256" in capsys.readouterr().out


def test_main_bad_option(capsys):
    assert main(["-q"]) == 1
    assert "Usage:" in capsys.readouterr().out


def test_main_reports_results(capsys):
    assert main(["-M", "32", "-N", "32"]) == 0
    out = capsys.readouterr().out
    assert "TEST_TRANS_RESULTS=1:" in out
    assert "correctness=1" in out


def test_main_reports_failed_submission(capsys):
    assert main(["-M", "8", "-N", "8"]) == 0
    assert f"TEST_TRANS_RESULTS=0:{INT_MAX}" in capsys.readouterr().out