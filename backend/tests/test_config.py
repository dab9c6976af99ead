from foodshare.core.config import Settings
from foodshare.deps import build_repo
from foodshare.repos.inmemory import InMemoryRepo
from foodshare.repos.jsonfile import JsonFileRepo


def test_auto_backend_prefers_mongo_when_uri_set():
    assert Settings(storage_backend="auto", mongodb_uri=None).resolved_backend == "file"
    assert Settings(storage_backend="auto", mongodb_uri="mongodb://db:27017").resolved_backend == "mongo"


def test_explicit_backend_wins():
    assert Settings(storage_backend="memory", mongodb_uri="mongodb://db:27017").resolved_backend == "memory"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("DEFAULT_EXPIRY_HOURS", "12")
    monkeypatch.setenv("SEED_DEMO", "0")
    s = Settings()
    assert s.resolved_backend == "memory"
    assert s.default_expiry_hours == 12
    assert s.seed_demo is False


def test_build_repo_per_backend(tmp_path):
    assert type(build_repo(Settings(storage_backend="memory"))) is InMemoryRepo
    repo = build_repo(Settings(storage_backend="file", data_file=str(tmp_path / "x.json")))
    assert isinstance(repo, JsonFileRepo)
    assert repo.path == tmp_path / "x.json"
