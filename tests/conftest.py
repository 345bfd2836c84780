import pytest

# This test configuration runs every test three times:
# 1) evaluating dictionary sugar directly ["plain"]
# 2) desugaring first with the CONSTRUCT strategy ["construct"]
# 3) desugaring first with the LOOKUP strategy ["lookup"]
# Most tests instantiate Interpreter() directly. We use an autouse fixture to
# set the environment variables dictscheme.config reads, so Interpreter()
# picks up the mode without changing individual test files. Tests that pin a
# mode pass desugar=/strategy= explicitly.


@pytest.fixture(params=["plain", "construct", "lookup"])
def desugar_mode(request):
    return request.param


@pytest.fixture(autouse=True)
def _force_desugar_mode(desugar_mode, monkeypatch):
    if desugar_mode == "plain":
        monkeypatch.delenv("DICTSCHEME_DESUGAR", raising=False)
        monkeypatch.delenv("DICTSCHEME_DESUGAR_STRATEGY", raising=False)
    else:
        monkeypatch.setenv("DICTSCHEME_DESUGAR", "1")
        monkeypatch.setenv("DICTSCHEME_DESUGAR_STRATEGY", desugar_mode)
