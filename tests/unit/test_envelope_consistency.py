import importlib.util
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def _load_checker():
    spec = importlib.util.spec_from_file_location(
        "check_envelope_consistency", ROOT / "scripts" / "check_envelope_consistency.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_every_endpoint_returns_an_envelope():
    checker = _load_checker()
    files = sorted((ROOT / "clearr" / "api").glob("*_endpoints.py"))
    assert files
    for path in files:
        assert checker.scan_endpoint_file(path) == [], path.name


def test_checker_flags_bare_dict(tmp_path):
    checker = _load_checker()
    module = tmp_path / "bad_endpoints.py"
    module.write_text(
        "@router.get('/x')\n"
        "async def bad():\n"
        "    return {'ok': True}\n"
    )
    assert checker.scan_endpoint_file(module) == [(3, "bad")]
